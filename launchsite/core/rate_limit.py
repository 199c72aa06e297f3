"""
rate_limit.py — Global rate limiter instance.

Uses slowapi (a Starlette-compatible wrapper around the `limits` library).
Requests are keyed by client IP address. The analyze endpoint is the only
limited route: each call may fan out to Overpass and Gemini.

Usage in routes:
    @router.post("/analyze")
    @limiter.limit(settings.analyze_rate_limit)
    async def analyze(request: Request, payload: AnalyzeLocationRequest):
        ...
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from launchsite.core.config import settings

limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)
