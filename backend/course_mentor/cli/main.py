"""CLI entrypoint for Course Mentor."""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Optional

import requests
import typer
import uvicorn

app = typer.Typer(name="cmentor", help="Course Mentor command-line interface")
notify_app = typer.Typer(name="notify", help="Motivational email campaign")
app.add_typer(notify_app, name="notify")

DEFAULT_HOST = "http://127.0.0.1:8000"


def _resolve_host(override: Optional[str]) -> str:
    if override:
        return override.rstrip("/")
    env_host = os.environ.get("CMENTOR_HOST")
    if env_host:
        return env_host.rstrip("/")
    return DEFAULT_HOST


def _request(method: str, path: str, host: Optional[str] = None, **kwargs) -> requests.Response:
    url = f"{_resolve_host(host)}{path}"
    resp = requests.request(method, url, timeout=120, **kwargs)
    if not resp.ok:
        try:
            detail = resp.json()
        except ValueError:
            detail = resp.text
        typer.echo(f"Request failed ({resp.status_code}): {detail}", err=True)
        raise typer.Exit(code=1)
    return resp


def _print(resp: requests.Response) -> None:
    typer.echo(json.dumps(resp.json(), indent=2, ensure_ascii=False))


@app.command()
def ingest(
    class_id: str = typer.Argument(..., help="Class identifier"),
    path: Path = typer.Argument(..., help="PDF file to ingest"),
    document_id: Optional[str] = typer.Option(None, "--document-id", help="Explicit document identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Extract, chunk and index a PDF for a class."""
    body: dict[str, object] = {"path": str(path.expanduser().resolve())}
    if document_id:
        body["document_id"] = document_id
    _print(_request("POST", f"/classes/{class_id}/documents", host=host, json=body))


@app.command()
def ask(
    class_id: str = typer.Argument(..., help="Class identifier"),
    question: str = typer.Argument(..., help="Question for the mentor"),
    student: str = typer.Option("cli", "--student", help="Student identifier recorded in the history"),
    class_name: Optional[str] = typer.Option(None, "--class-name", help="Human readable class name"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Ask the class mentor a question."""
    payload = {"question": question, "student_id": student, "class_name": class_name}
    resp = _request("POST", f"/classes/{class_id}/chat", host=host, json=payload)
    data = resp.json()
    typer.echo(data["answer"])
    for index, source in enumerate(data.get("sources", []), start=1):
        meta = source.get("metadata", {})
        typer.echo(f"[{index}] {meta.get('source')} (p. {meta.get('page')})")


@app.command()
def search(
    class_id: str = typer.Argument(..., help="Class identifier"),
    query: str = typer.Argument(..., help="Query text"),
    k: int = typer.Option(5, "--k", help="Number of results to return"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show the chunks the mentor would use for a query."""
    _print(_request("POST", f"/classes/{class_id}/search", host=host, json={"query": query, "k": k}))


@app.command()
def themes(
    class_id: str = typer.Argument(..., help="Class identifier"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show the themes detected in a class corpus."""
    _print(_request("GET", f"/classes/{class_id}/themes", host=host))


@app.command()
def serve(
    bind: str = typer.Option("127.0.0.1", "--bind", help="Interface to listen on"),
    port: int = typer.Option(8000, "--port", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Restart on code changes"),
) -> None:
    """Run the Course Mentor API server."""
    uvicorn.run("course_mentor.app:app", host=bind, port=port, reload=reload)


@notify_app.command("run")
def notify_run(
    candidates_file: Path = typer.Argument(..., help="JSON file with a list of candidates"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Email inactive students listed in CANDIDATES_FILE."""
    candidates = json.loads(candidates_file.expanduser().read_text(encoding="utf-8"))
    _print(_request("POST", "/notifications/motivational/run", host=host, json={"candidates": candidates}))


@notify_app.command("stats")
def notify_stats(
    class_id: Optional[str] = typer.Option(None, "--class-id", help="Restrict to one class"),
    host: Optional[str] = typer.Option(None, "--host", help="Override backend host"),
) -> None:
    """Show motivational email counts."""
    params = {"class_id": class_id} if class_id else None
    _print(_request("GET", "/notifications/motivational/stats", host=host, params=params))


if __name__ == "__main__":
    app()
