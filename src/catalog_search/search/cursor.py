"""Opaque page cursors.

A cursor is the base64 encoding of the zero-based page number written in
decimal, e.g. page ``1`` is ``"MQ=="``. Callers must round-trip cursors
verbatim.
"""

from __future__ import annotations

import base64
import binascii


def encode_page_cursor(page: int) -> str:
    if page < 0:
        msg = f"Page must be non-negative, got {page}"
        raise ValueError(msg)
    return base64.b64encode(str(page).encode("utf-8")).decode("ascii")


def decode_page_cursor(cursor: str | None = None) -> int:
    """Decode ``cursor`` to a page number; anything unusable means the first page."""
    if not cursor:
        return 0
    try:
        raw = base64.b64decode(cursor.encode("ascii"), validate=True).decode("utf-8")
        if not (raw.isascii() and raw.isdigit()):
            return 0
        # int() refuses digit strings beyond sys.get_int_max_str_digits()
        return int(raw)
    except (UnicodeError, binascii.Error, ValueError):
        return 0
