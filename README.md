# twsefeed

Reads a binary capture of the Taiwan Stock Exchange market data feed. It
picks out the packets it understands and returns the stock data as plain
Python objects.

It supports two packet formats:

- **Format 1**: stock basic information. This is a fixed 114-byte packet.
  It holds the stock code, the Big5 name, the reference price, the limit
  prices, warrant details and other fields.
- **Format 6**: real-time quotes. A fixed 29-byte section comes first. A
  variable number of price/quantity pairs follow it, for the deal, bid and
  ask sides. The reveal flag gives how many there are of each.

## Installation

```
pip install .
```

Python 3.10 or later is required. The package has no runtime dependencies.

## Command line

```
twsefeed [CODE] [-f FILE]
```

- `-f/--file`: the capture file to read. The default is `../data/Tse.bin`,
  relative to the working directory.
- `CODE`: a stock code such as `2330`. If you leave it out, the command asks
  for one on standard input.

The code is cut or padded to six characters. The command then prints:

- the stock's Format 1 basic information (code, name, reference price and
  limit prices);
- the number of recorded deals and the latest deal price and quantity;
- the highest price, the lowest price and the total volume.

It writes the deal history to `<code>_history.csv` in the working directory.
Trailing spaces are stripped from the code in that name. The file is UTF-8
with a BOM and has the columns code, name, price and quantity.

If the capture file cannot be opened, the command exits with status 1.

## Library use

```python
from twsefeed.parser import PacketParser
from twsefeed.database import Database
from twsefeed.encoding import pad_stock_code

with open("Tse.bin", "rb") as fh:
    raw = fh.read()

results = PacketParser(raw).parse_all()

db = Database()
db.load(results)

code = pad_stock_code("2330")
info = db.query_format1(code)
if info is not None:
    print(info.stock_info.name, info.stock_info.ref_price.to_float(2))

ticks = db.query_format6(code)
stats = db.summarize(code)
print(stats.max_price, stats.min_price, stats.total_volume)

db.export_history_csv(code, "2330_history.csv")
```

`twsefeed.app.run(filename)` reads and parses a file in one step. It
returns the loaded `Database`.

### How packets are found

`PacketParser.parse_all()` scans the buffer for ESC (`0x1B`) and reads the
BCD length that follows it. A packet is passed on only if it ends in
`0x0D 0x0A` at that length. The format code byte then decides which parser
handles it, through `create_parser`.

- A packet the parser rejects is skipped. So is an unknown format code.
  Scanning then resumes one byte later.
- Scanning stops if a packet's stated length runs past the end of the data.

Progress goes to the standard `logging` module.

The two formats are checked differently:

- **Format 1**: `Format1Parser.parse` checks the ESC byte, the XOR checksum
  and the terminator. It raises `PacketError` if any of them fail.
- **Format 6**: `Format6Parser.parse` checks only that the packet is long
  enough for the prices its reveal flag announces. `QuoteFixed.verify()`
  runs the ESC, XOR and terminator checks on demand.

### Database

`Database` keeps both kinds of data in memory:

- the latest Format 1 packet per stock;
- every Format 6 deal price, in arrival order. Format 6 packets without a
  deal price are not recorded.

It provides these methods:

- `query_format1(code)` returns a `StockBasicInfo`, or `None`.
- `query_format6(code)` returns a list of `PriceVolume`.
- `summarize(code)` returns `StockStats`. All values are zero when there are
  no deals.
- `write_to_file(path)` writes a readable dump of everything held.
- `export_history_csv(code, filename=None)` writes the CSV and returns its
  path. It raises `KeyError` if the stock has no deals.

### Building blocks

- **`twsefeed.fields`**
  - `Bcd` decodes packed BCD fields. It provides `to_int`, `to_float`,
    `digits` and `to_decimal_string`.
  - `fixed_ascii` and `fixed_key` handle fixed-width text.
  - `Verification` holds the results of the three checks.
  - `PacketError` is raised for truncated or invalid packets.
- **`twsefeed.format1`**
  - `StockBasicInfo.from_bytes` decodes a Format 1 packet.
  - `Format1Parser` decodes a packet and verifies it.
- **`twsefeed.format6`**
  - `QuoteFixed.from_bytes` decodes the fixed section of a Format 6 packet.
  - `reveal_counts` splits a reveal flag into its deal, bid and ask counts.
  - `Format6Parser` produces a `RealtimeQuote`.
- **`twsefeed.encoding`**
  - `big5_to_utf8` decodes Big5 bytes.
  - `pad_stock_code` pads a code to six characters.
  - `to_price` converts a raw value with four implied decimals.

## What it does not do

- It reads captured files only. It does not connect to a live feed.
- It understands Formats 1 and 6 only. Packets in other formats are skipped.
- The database lives in memory. Nothing is kept between runs, except the
  CSV and text files you ask it to write.