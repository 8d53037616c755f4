"""Text and number helpers for exchange packet fields."""

from __future__ import annotations

STOCK_CODE_WIDTH = 6


def big5_to_utf8(data: bytes) -> str:
    """Decode Big5 bytes (up to the first NUL) into text."""
    return bytes(data).split(b"\0", 1)[0].decode("cp950", errors="replace")


def pad_stock_code(code: str) -> str:
    """Fit a stock code to six characters, padding on the right with spaces."""
    return code[:STOCK_CODE_WIDTH].ljust(STOCK_CODE_WIDTH, " ")


def to_price(raw: int) -> float:
    """Convert a raw integer with four implied decimals to a price."""
    return raw / 10000.0