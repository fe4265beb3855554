"""FastAPI application setup for Course Mentor."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from course_mentor.api.routes_admin import router as admin_router
from course_mentor.api.routes_chat import router as chat_router
from course_mentor.api.routes_documents import router as documents_router
from course_mentor.core.logging import configure_logging

configure_logging()

app = FastAPI(
    title="Course Mentor",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:3000",
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(chat_router, prefix="", tags=["chat"])
app.include_router(documents_router, prefix="", tags=["documents"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
