from functools import reduce
from operator import xor

from twsefeed.format1 import Format1Parser, StockBasicInfo
from twsefeed.format6 import Format6Parser, RealtimeQuote
from twsefeed.parser import PacketParser, create_parser


def bcd(value: int, width: int) -> bytes:
    return bytes.fromhex(str(value).zfill(width * 2))


def make_format6(code="2330", time=93015000000, prices=((40250, 3),)):
    flag = 0x80 if prices else 0x00
    length = 29 + 9 * len(prices) + 3
    body = (
        bcd(length, 2)
        + b"\x01\x06\x04"
        + bcd(1, 4)
        + code.ljust(6).encode("ascii")
        + bcd(time, 6)
        + bytes([flag, 0, 0])
        + bcd(100, 4)
    )
    for price, qty in prices:
        body += bcd(price, 5) + bcd(qty, 4)
    return b"\x1b" + body + bytes([reduce(xor, body, 0)]) + b"\r\n"


def make_format1(code="2330", ref=40250, break_xor=False):
    raw = bytearray(114)
    raw[0] = 0x1B
    raw[1:3] = bcd(114, 2)
    raw[3] = 0x01
    raw[4] = 0x01
    raw[5] = 0x09
    raw[10:16] = code.ljust(6).encode("ascii")
    raw[40:45] = bcd(ref, 5)
    raw[111] = reduce(xor, raw[1:111], 0) ^ (0xFF if break_xor else 0)
    raw[112:114] = b"\r\n"
    return bytes(raw)


# Helpers for the minute-bar aggregation carried over from the source's tests.

def hhmmss(quote):
    return int(quote.fixed.body.match_time.digits()[:6])


def interval_key(hhmm, interval):
    return (hhmm // 100) * 100 + (hhmm % 100) // interval * interval


def add_trade(bars, key, price, volume):
    bar = bars.setdefault(key, {"open": price, "high": price, "low": price,
                                "close": price, "volume": 0})
    bar["high"] = max(bar["high"], price)
    bar["low"] = min(bar["low"], price)
    bar["close"] = price
    bar["volume"] += volume


def test_create_parser_by_format_code():
    assert create_parser(0x01).format_name == "Format1"
    assert create_parser(0x06).format_name == "Format6"
    assert isinstance(create_parser(0x01), Format1Parser)
    assert isinstance(create_parser(0x06), Format6Parser)


def test_create_parser_unknown_code():
    assert create_parser(0x02) is None
    assert create_parser(0xFF) is None


def test_parse_all_mixed_stream_with_garbage():
    data = b"\x00\x07" + make_format1() + b"\xff" + make_format6() + b"\x42"
    parser = PacketParser(data)
    results = parser.parse_all()
    assert len(results) == 2
    assert isinstance(results[0], StockBasicInfo)
    assert results[0].stock_info.stock_code == "2330  "
    assert results[0].stock_info.ref_price.to_float(2) == 402.5
    assert isinstance(results[1], RealtimeQuote)
    assert parser.results == results


def test_parse_all_stops_at_truncated_packet():
    packet = make_format6()
    results = PacketParser(packet + packet[:-5]).parse_all()
    assert len(results) == 1


def test_parse_all_skips_bad_terminator():
    packet = make_format6()
    broken = packet[:-1] + b"\x00"
    assert PacketParser(broken).parse_all() == []


def test_parse_all_skips_rejected_format1():
    data = make_format1(break_xor=True) + make_format6(code="2317")
    results = PacketParser(data).parse_all()
    assert len(results) == 1
    assert results[0].stock_code == "2317  "


def test_parse_all_skips_unknown_format():
    packet = bytearray(make_format6())
    packet[4] = 0x02
    assert PacketParser(bytes(packet)).parse_all() == []


def test_parse_all_empty_input():
    assert PacketParser(b"").parse_all() == []


def test_minute_bars_for_2330():
    ticks = [
        ("2330", 93100000000, 50000, 10),
        ("2317", 93200000000, 10000, 99),
        ("2330", 93300000000, 50500, 5),
        ("2330", 93600000000, 49800, 7),
    ]
    data = b"".join(make_format6(code, time, ((price, qty),))
                    for code, time, price, qty in ticks)
    results = PacketParser(data).parse_all()

    format6 = [r for r in results if isinstance(r, RealtimeQuote)]
    matched = [q for q in format6 if q.stock_code.strip() == "2330"]
    assert len(results) == 4
    assert len(format6) == 4
    assert len(matched) == 3

    bars1, bars5, bars10 = {}, {}, {}
    for quote in matched:
        hhmm = hhmmss(quote) // 100
        price = quote.deal_prices[0].price.to_float(2)
        volume = quote.deal_prices[0].quantity.to_int()
        add_trade(bars1, hhmm, price, volume)
        add_trade(bars5, interval_key(hhmm, 5), price, volume)
        add_trade(bars10, interval_key(hhmm, 10), price, volume)

    assert sorted(bars1) == [931, 933, 936]
    assert bars5[930] == {"open": 500.0, "high": 505.0, "low": 500.0,
                          "close": 505.0, "volume": 15}
    assert bars5[935] == {"open": 498.0, "high": 498.0, "low": 498.0,
                          "close": 498.0, "volume": 7}
    assert bars10[930] == {"open": 500.0, "high": 505.0, "low": 498.0,
                           "close": 498.0, "volume": 22}