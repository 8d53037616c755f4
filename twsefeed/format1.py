"""Format 1 packets: stock basic information (fixed 114 bytes)."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from operator import xor

from .encoding import big5_to_utf8
from .fields import Bcd, PacketError, Verification, fixed_ascii

PACKET_SIZE = 114
ESC = 0x1B
TERMINATOR = b"\r\n"
# XOR covers the bytes from the message length through the line flag.
_XOR_START = 1
_XOR_END = 111


class _Cursor:
    """Reads consecutive fixed-width fields from a byte string."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def take(self, size: int) -> bytes:
        chunk = self._data[self._pos:self._pos + size]
        self._pos += size
        return chunk

    def bcd(self, size: int) -> Bcd:
        return Bcd(self.take(size))

    def ascii(self, size: int) -> str:
        return fixed_ascii(self.take(size))


@dataclass(frozen=True)
class Format1Header:
    message_length: Bcd
    business_code: Bcd
    format_code: Bcd
    version_code: Bcd
    sequence_number: Bcd

    @classmethod
    def _read(cls, cur: _Cursor) -> Format1Header:
        return cls(cur.bcd(2), cur.bcd(1), cur.bcd(1), cur.bcd(1), cur.bcd(4))


@dataclass(frozen=True)
class Format1StockInfo:
    stock_code: str
    stock_name: bytes
    industry_code: str
    security_category: str
    lot_note: str
    abnormal_code: Bcd
    board_type: str
    ref_price: Bcd
    up_limit: Bcd
    down_limit: Bcd
    non_par_flag: str
    special_promotion_flag: str
    abnormal_security_flag: str
    day_trading_flag: str
    short_sell_exempt_flag: str
    borrow_sell_exempt_flag: str
    match_interval: Bcd

    @property
    def name(self) -> str:
        """The stock name decoded from Big5."""
        return big5_to_utf8(self.stock_name)

    @classmethod
    def _read(cls, cur: _Cursor) -> Format1StockInfo:
        return cls(
            stock_code=cur.ascii(6),
            stock_name=cur.take(16),
            industry_code=cur.ascii(2),
            security_category=cur.ascii(2),
            lot_note=cur.ascii(2),
            abnormal_code=cur.bcd(1),
            board_type=cur.ascii(1),
            ref_price=cur.bcd(5),
            up_limit=cur.bcd(5),
            down_limit=cur.bcd(5),
            non_par_flag=cur.ascii(1),
            special_promotion_flag=cur.ascii(1),
            abnormal_security_flag=cur.ascii(1),
            day_trading_flag=cur.ascii(1),
            short_sell_exempt_flag=cur.ascii(1),
            borrow_sell_exempt_flag=cur.ascii(1),
            match_interval=cur.bcd(3),
        )


@dataclass(frozen=True)
class Format1WarrantInfo:
    warrant_id: str
    strike_price: Bcd
    prev_day_exercise_qty: Bcd
    prev_day_cancel_qty: Bcd
    outstanding_qty: Bcd
    exercise_ratio: Bcd
    upper_price: Bcd
    lower_price: Bcd
    expiration_date: Bcd

    @classmethod
    def _read(cls, cur: _Cursor) -> Format1WarrantInfo:
        return cls(
            warrant_id=cur.ascii(1),
            strike_price=cur.bcd(5),
            prev_day_exercise_qty=cur.bcd(5),
            prev_day_cancel_qty=cur.bcd(5),
            outstanding_qty=cur.bcd(5),
            exercise_ratio=cur.bcd(4),
            upper_price=cur.bcd(5),
            lower_price=cur.bcd(5),
            expiration_date=cur.bcd(4),
        )


@dataclass(frozen=True)
class Format1OtherInfo:
    foreign_stock_flag: str
    trading_unit: Bcd
    currency_code: str

    @classmethod
    def _read(cls, cur: _Cursor) -> Format1OtherInfo:
        return cls(cur.ascii(1), cur.bcd(3), cur.ascii(3))


@dataclass(frozen=True)
class StockBasicInfo:
    """A complete Format 1 packet."""

    esc_code: Bcd
    header: Format1Header
    stock_info: Format1StockInfo
    warrant_info: Format1WarrantInfo
    other_info: Format1OtherInfo
    line_flag: Bcd
    xor_check: Bcd
    terminal_code: Bcd
    raw: bytes

    @classmethod
    def from_bytes(cls, data: bytes) -> StockBasicInfo:
        """Decode the first 114 bytes of ``data``."""
        if len(data) < PACKET_SIZE:
            raise PacketError(
                f"Format1 packet too short ({len(data)} < {PACKET_SIZE})"
            )
        raw = bytes(data[:PACKET_SIZE])
        cur = _Cursor(raw)
        return cls(
            esc_code=cur.bcd(1),
            header=Format1Header._read(cur),
            stock_info=Format1StockInfo._read(cur),
            warrant_info=Format1WarrantInfo._read(cur),
            other_info=Format1OtherInfo._read(cur),
            line_flag=cur.bcd(1),
            xor_check=cur.bcd(1),
            terminal_code=cur.bcd(2),
            raw=raw,
        )

    def check_xor(self) -> bool:
        """True if the XOR of the message bytes matches the check byte."""
        value = reduce(xor, self.raw[_XOR_START:_XOR_END], 0)
        return value == self.xor_check[0]

    def verify_esc(self) -> bool:
        return self.esc_code[0] == ESC

    def verify_terminal(self) -> bool:
        return bytes(self.terminal_code) == TERMINATOR

    def verify(self) -> Verification:
        return Verification(
            esc=self.verify_esc(),
            terminal=self.verify_terminal(),
            xor=self.check_xor(),
        )


class Format1Parser:
    """Parser for Format 1 packets."""

    format_name = "Format1"

    def __init__(self) -> None:
        self.result: StockBasicInfo | None = None

    def parse(self, data: bytes) -> StockBasicInfo:
        """Decode and verify one packet, raising PacketError on failure."""
        info = StockBasicInfo.from_bytes(data)
        self.result = info
        check = info.verify()
        if not check.ok():
            problems = [
                label
                for label, passed in (
                    ("bad ESC", check.esc),
                    ("bad terminator", check.terminal),
                    ("bad XOR", check.xor),
                )
                if not passed
            ]
            raise PacketError("Format1 verification failed: " + ", ".join(problems))
        return info