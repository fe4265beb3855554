"""Tests for the cmentor CLI."""

from typing import Any

import pytest
from typer.testing import CliRunner

from course_mentor.cli import main as cli

from fakes import FakeResponse

runner = CliRunner()


class _Recorder:
    def __init__(self, response: FakeResponse) -> None:
        self.response = response
        self.calls: list[tuple[str, str, dict[str, Any]]] = []

    def __call__(self, method: str, url: str, **kwargs: Any) -> FakeResponse:
        self.calls.append((method, url, kwargs))
        return self.response


@pytest.fixture
def recorder(monkeypatch: pytest.MonkeyPatch) -> _Recorder:
    monkeypatch.delenv("CMENTOR_HOST", raising=False)
    rec = _Recorder(FakeResponse(200, {"answer": "Hola", "sources": [{"metadata": {"source": "a.pdf", "page": 2}}]}))
    monkeypatch.setattr(cli.requests, "request", rec)
    return rec


def test_ask_prints_answer_and_sources(recorder: _Recorder) -> None:
    result = runner.invoke(cli.app, ["ask", "c1", "¿Qué es ROI?", "--student", "s9"])
    assert result.exit_code == 0, result.output
    assert "Hola" in result.output
    assert "[1] a.pdf (p. 2)" in result.output
    method, url, kwargs = recorder.calls[0]
    assert (method, url) == ("POST", "http://127.0.0.1:8000/classes/c1/chat")
    assert kwargs["json"]["student_id"] == "s9"


def test_host_from_environment(recorder: _Recorder, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CMENTOR_HOST", "http://mentor.test/")
    result = runner.invoke(cli.app, ["themes", "c1"])
    assert result.exit_code == 0, result.output
    assert recorder.calls[0][1] == "http://mentor.test/classes/c1/themes"


def test_request_failure_exits_non_zero(recorder: _Recorder) -> None:
    recorder.response = FakeResponse(404, {"detail": "File not found"})
    result = runner.invoke(cli.app, ["ingest", "c1", "missing.pdf"])
    assert result.exit_code == 1


def test_serve_runs_the_api(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []
    monkeypatch.setattr(cli.uvicorn, "run", lambda target, **kwargs: calls.append((target, kwargs)))
    result = runner.invoke(cli.app, ["serve", "--port", "9001", "--reload"])
    assert result.exit_code == 0, result.output
    assert calls == [("course_mentor.app:app", {"host": "127.0.0.1", "port": 9001, "reload": True})]
