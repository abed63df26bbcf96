"""FastAPI dependencies: analyzer instance and shared rate limiter."""

from __future__ import annotations

from fastapi import Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from src.parsers.analyzer import TokenAnalyzer

# Rate limiter (shared instance)
limiter = Limiter(key_func=get_remote_address)


def get_analyzer(request: Request) -> TokenAnalyzer:
    """Return the analyzer created at application startup."""
    return request.app.state.analyzer
