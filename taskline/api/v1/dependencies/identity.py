"""Authenticated actor resolution.

Token validation happens upstream (gateway / auth layer), which forwards the
user id in a header; this dependency only reads and parses it.
"""

from __future__ import annotations

from fastapi import HTTPException, Request

from taskline.core.config import get_settings


def get_current_user_id(request: Request) -> int:
    """Return the acting user's id; 401 if the header is missing or malformed."""
    header = get_settings().actor_header_name
    raw = request.headers.get(header)
    if raw is None or not raw.strip():
        raise HTTPException(status_code=401, detail=f"Missing {header} header")
    try:
        user_id = int(raw.strip())
    except ValueError:
        raise HTTPException(status_code=401, detail=f"Malformed {header} header") from None
    if user_id <= 0:
        raise HTTPException(status_code=401, detail=f"Malformed {header} header")
    return user_id
