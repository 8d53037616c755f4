"""Command line entry: load a packet file, look up a stock, export its deals."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .database import Database
from .encoding import pad_stock_code
from .parser import PacketParser, ParsedResult

DEFAULT_DATA = Path("../data/Tse.bin")


def _read_packets(filename: str | Path) -> tuple[bytes, list[ParsedResult]]:
    raw = Path(filename).read_bytes()
    return raw, PacketParser(raw).parse_all()


def run(filename: str | Path) -> Database:
    """Read and parse a packet file and return the loaded database."""
    raw, results = _read_packets(filename)
    print(f"Loaded {len(raw)} bytes of packet data")
    database = Database()
    database.load(results)
    print("Processing complete")
    return database


def main(argv: Sequence[str] | None = None) -> int:
    arg_parser = argparse.ArgumentParser(
        description="Look up a stock in an exchange packet capture."
    )
    arg_parser.add_argument("code", nargs="?", help="stock code, e.g. 2330")
    arg_parser.add_argument(
        "-f", "--file", default=str(DEFAULT_DATA), help="packet capture file"
    )
    args = arg_parser.parse_args(argv)

    try:
        raw, results = _read_packets(args.file)
    except OSError as exc:
        print(f"Cannot open {args.file}: {exc}", file=sys.stderr)
        return 1
    print(f"Read {len(raw)} bytes")
    print(f"Packets: {len(results)}")

    database = Database()
    database.load(results)

    code = args.code
    if code is None:
        try:
            code = input("Stock code (e.g. 2330): ").strip()
        except EOFError:
            print("No stock code given", file=sys.stderr)
            return 1
    padded = pad_stock_code(code)

    info = database.query_format1(padded)
    if info is not None:
        stock = info.stock_info
        print("\nStock basic information (Format1)")
        print(f"Code: {stock.stock_code}")
        print(f"Name: {stock.name}")
        print(f"Reference price: {stock.ref_price.to_float(2):g}")
        print(f"Limit up: {stock.up_limit.to_float(2):g}")
        print(f"Limit down: {stock.down_limit.to_float(2):g}")
    else:
        print("No basic information found (Format1)")

    ticks = database.query_format6(padded)
    if ticks:
        latest = ticks[-1]
        print(f"\nDeal history (Format6): {len(ticks)} deals")
        print(
            f"Latest price {latest.price.to_float(2):g}, "
            f"quantity {latest.quantity.to_int()}"
        )
    else:
        print("No deals found (Format6)")

    stats = database.summarize(padded)
    print("\nDeal statistics")
    print(
        f"High: {stats.max_price:g} | Low: {stats.min_price:g}"
        f" | Total volume: {stats.total_volume}"
    )

    try:
        path = database.export_history_csv(padded)
    except KeyError as exc:
        print(f"No deal history to export: {exc}", file=sys.stderr)
    else:
        print(f"CSV written: {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())