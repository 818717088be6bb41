"""Shared HTTP client utilities (e.g. timeouts)."""

from __future__ import annotations

import httpx


def timeouts_for(seconds: float) -> httpx.Timeout:
    """Build httpx.Timeout with bounded connect/pool for fail-fast on unreachable servers."""
    total = float(seconds)
    connect = min(5.0, total)
    return httpx.Timeout(connect=connect, read=total, write=total, pool=connect)


def request_id_from_headers(headers: httpx.Headers) -> str:
    # httpx.Headers lookups are case-insensitive.
    return (headers.get("X-Request-Id") or "").strip()
