"""Fixed-width field types shared by the exchange packet formats."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator


class PacketError(ValueError):
    """Raised when a packet is truncated or fails its integrity checks."""


@dataclass(frozen=True)
class Verification:
    """Outcome of the ESC, terminator and XOR checks on one packet."""

    esc: bool
    terminal: bool
    xor: bool

    def ok(self) -> bool:
        """True when every check passed."""
        return self.esc and self.terminal and self.xor


@dataclass(frozen=True)
class Bcd:
    """A packed binary-coded decimal field: two decimal digits per byte."""

    raw: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "raw", bytes(self.raw))

    def __len__(self) -> int:
        return len(self.raw)

    def __getitem__(self, index: int) -> int:
        return self.raw[index]

    def __bytes__(self) -> bytes:
        return self.raw

    def _nibbles(self) -> Iterator[int]:
        for byte in self.raw:
            yield (byte >> 4) & 0xF
            yield byte & 0xF

    def to_int(self) -> int:
        """Value of the digits as an integer (0x12 0x34 gives 1234)."""
        result = 0
        for byte in self.raw:
            result = result * 100 + ((byte >> 4) & 0xF) * 10 + (byte & 0xF)
        return result

    def to_float(self, decimal_places: int) -> float:
        """Value with the last ``decimal_places`` digits taken as the fraction."""
        value = float(self.to_int())
        for _ in range(decimal_places):
            value /= 10.0
        return value

    def digits(self) -> str:
        """All nibbles written out as decimal text, leading zeros kept."""
        return "".join(str(nibble) for nibble in self._nibbles())

    def to_decimal_string(self, decimal_places: int) -> str:
        """Digits with a decimal point inserted ``decimal_places`` from the right."""
        if decimal_places <= 0:
            raise ValueError("decimal_places must be positive")
        digits = self.digits()
        if len(digits) <= decimal_places:
            return "0." + "0" * (decimal_places - len(digits)) + digits
        split = len(digits) - decimal_places
        return f"{digits[:split]}.{digits[split:]}"


def fixed_ascii(data: bytes) -> str:
    """Text of a fixed-width character field, ending at the first NUL."""
    return bytes(data).split(b"\0", 1)[0].decode("latin-1")


def fixed_key(text: str | bytes, width: int) -> str:
    """Normalise ``text`` into a NUL-padded key of exactly ``width`` characters."""
    if isinstance(text, (bytes, bytearray)):
        text = bytes(text).decode("latin-1")
    text = text.split("\0", 1)[0][:width]
    return text.ljust(width, "\0")