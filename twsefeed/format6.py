"""Format 6 packets: real-time trade and quote information."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from operator import xor

from .fields import Bcd, PacketError, Verification, fixed_ascii

FIXED_SIZE = 29
PRICE_VOLUME_SIZE = 9
TRAILER_SIZE = 3
ESC = 0x1B
TERMINATOR = b"\r\n"


def reveal_counts(flag: int) -> tuple[int, int, int]:
    """Split a reveal flag into (deal, bid, ask) price counts.

    Bit 7 marks a deal price; bits 4-6 hold the bid count and bits 1-3
    the ask count.
    """
    deal = 1 if flag & 0x80 else 0
    bid = (flag >> 4) & 0x7
    ask = (flag >> 1) & 0x7
    return deal, bid, ask


@dataclass(frozen=True)
class Format6Header:
    message_length: Bcd
    business_code: Bcd
    format_code: Bcd
    version_code: Bcd
    sequence_number: Bcd

    @classmethod
    def _from_bytes(cls, data: bytes) -> Format6Header:
        return cls(
            message_length=Bcd(data[0:2]),
            business_code=Bcd(data[2:3]),
            format_code=Bcd(data[3:4]),
            version_code=Bcd(data[4:5]),
            sequence_number=Bcd(data[5:9]),
        )


@dataclass(frozen=True)
class Format6Body:
    stock_code: str
    match_time: Bcd
    reveal_flag: Bcd
    limit_flag: Bcd
    status_flag: Bcd
    cumulative_volume: Bcd

    @property
    def price_counts(self) -> tuple[int, int, int]:
        """The (deal, bid, ask) counts announced by the reveal flag."""
        return reveal_counts(self.reveal_flag[0])

    @classmethod
    def _from_bytes(cls, data: bytes) -> Format6Body:
        return cls(
            stock_code=fixed_ascii(data[0:6]),
            match_time=Bcd(data[6:12]),
            reveal_flag=Bcd(data[12:13]),
            limit_flag=Bcd(data[13:14]),
            status_flag=Bcd(data[14:15]),
            cumulative_volume=Bcd(data[15:19]),
        )


@dataclass(frozen=True)
class PriceVolume:
    """One price (two implied decimals) and its quantity."""

    price: Bcd
    quantity: Bcd

    @classmethod
    def _from_bytes(cls, data: bytes) -> PriceVolume:
        return cls(price=Bcd(data[0:5]), quantity=Bcd(data[5:9]))


@dataclass(frozen=True)
class QuoteFixed:
    """The fixed 29-byte leading section of a Format 6 packet.

    ``raw`` keeps every byte that was handed in, since the XOR and
    terminator checks look past the fixed section.
    """

    esc_code: Bcd
    header: Format6Header
    body: Format6Body
    raw: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> QuoteFixed:
        """Decode the fixed section at the start of ``data``."""
        raw = bytes(data)
        if len(raw) < FIXED_SIZE:
            raise PacketError(
                f"Format6 packet too short ({len(raw)} < {FIXED_SIZE})"
            )
        return cls(
            esc_code=Bcd(raw[0:1]),
            header=Format6Header._from_bytes(raw[1:10]),
            body=Format6Body._from_bytes(raw[10:FIXED_SIZE]),
            raw=raw,
        )

    def check_xor(self) -> bool:
        """True if the XOR of the header and body equals the byte after them."""
        if len(self.raw) <= FIXED_SIZE:
            return False
        value = reduce(xor, self.raw[1:FIXED_SIZE], 0)
        return value == self.raw[FIXED_SIZE]

    def verify_esc(self) -> bool:
        return self.esc_code[0] == ESC

    def verify_terminal(self) -> bool:
        """True if CR LF follows the announced prices and the XOR byte."""
        total = sum(self.body.price_counts)
        pos = FIXED_SIZE + PRICE_VOLUME_SIZE * total + 1
        return self.raw[pos:pos + 2] == TERMINATOR

    def verify(self) -> Verification:
        return Verification(
            esc=self.verify_esc(),
            terminal=self.verify_terminal(),
            xor=self.check_xor(),
        )


@dataclass(frozen=True)
class RealtimeQuote:
    """A decoded Format 6 packet."""

    fixed: QuoteFixed
    deal_prices: tuple[PriceVolume, ...]
    bid_prices: tuple[PriceVolume, ...]
    ask_prices: tuple[PriceVolume, ...]
    xor_check: Bcd
    terminal_code: Bcd

    @property
    def stock_code(self) -> str:
        return self.fixed.body.stock_code


class Format6Parser:
    """Parser for Format 6 packets."""

    format_name = "Format6"

    def __init__(self) -> None:
        self.result: RealtimeQuote | None = None

    def parse(self, data: bytes) -> RealtimeQuote:
        """Decode one packet, raising PacketError if it is too short."""
        data = bytes(data)
        fixed = QuoteFixed.from_bytes(data)
        deal, bid, ask = fixed.body.price_counts
        total = deal + bid + ask
        xor_pos = FIXED_SIZE + total * PRICE_VOLUME_SIZE
        expected = xor_pos + TRAILER_SIZE
        if len(data) < expected:
            raise PacketError(
                f"Format6 packet too short for {total} prices "
                f"({len(data)} < {expected})"
            )
        prices = [
            PriceVolume._from_bytes(data[start:start + PRICE_VOLUME_SIZE])
            for start in range(FIXED_SIZE, xor_pos, PRICE_VOLUME_SIZE)
        ]
        quote = RealtimeQuote(
            fixed=fixed,
            deal_prices=tuple(prices[:deal]),
            bid_prices=tuple(prices[deal:deal + bid]),
            ask_prices=tuple(prices[deal + bid:]),
            xor_check=Bcd(data[xor_pos:xor_pos + 1]),
            terminal_code=Bcd(data[xor_pos + 1:xor_pos + 3]),
        )
        self.result = quote
        return quote