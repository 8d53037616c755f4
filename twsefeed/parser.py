"""Scanning a byte stream for packets and dispatching them by format."""

from __future__ import annotations

import logging
from typing import Callable, Protocol, Union

from .fields import Bcd, PacketError
from .format1 import Format1Parser, StockBasicInfo
from .format6 import Format6Parser, RealtimeQuote

logger = logging.getLogger(__name__)

ESC = 0x1B
TERMINATOR = b"\r\n"
# ESC, two length bytes, business code and format code.
_MIN_PACKET = 5

ParsedResult = Union[StockBasicInfo, RealtimeQuote]


class FormatParser(Protocol):
    """What every packet format parser provides."""

    format_name: str

    def parse(self, data: bytes) -> ParsedResult:
        """Decode one packet, raising PacketError if it is rejected."""


_PARSERS: dict[int, Callable[[], FormatParser]] = {
    0x01: Format1Parser,
    0x06: Format6Parser,
}


def create_parser(format_code: int) -> FormatParser | None:
    """A new parser for ``format_code``, or None if the format is unsupported."""
    factory = _PARSERS.get(format_code)
    return factory() if factory is not None else None


class PacketParser:
    """Finds ESC-framed packets in raw data and parses those it supports."""

    def __init__(self, data: bytes) -> None:
        self.data = bytes(data)
        self.results: list[ParsedResult] = []

    def parse_all(self) -> list[ParsedResult]:
        """Scan the whole buffer, collect parsed packets and return them."""
        data = self.data
        size = len(data)
        offset = 0
        logger.info("parsing %d bytes", size)

        while offset + 3 <= size:
            if data[offset] != ESC:
                offset += 1
                continue

            length = Bcd(data[offset + 1:offset + 3]).to_int()
            if offset + length > size:
                logger.warning(
                    "packet runs past end of data at offset %d, length %d",
                    offset, length,
                )
                break
            if length < _MIN_PACKET:
                offset += 1
                continue

            packet = data[offset:offset + length]
            if packet[-2:] != TERMINATOR:
                offset += 1
                continue

            parser = create_parser(packet[4])
            if parser is None:
                offset += 1
                continue

            try:
                self.results.append(parser.parse(packet))
            except PacketError as exc:
                logger.debug("rejected packet at offset %d: %s", offset, exc)
                offset += 1
            else:
                offset += length

        if offset < size:
            logger.info("finished with %d bytes unprocessed", size - offset)
        else:
            logger.info("all packets parsed")
        return self.results