"""In-memory store of parsed packets with queries, statistics and export."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from .encoding import STOCK_CODE_WIDTH
from .fields import fixed_key
from .format1 import StockBasicInfo
from .format6 import PriceVolume, RealtimeQuote

logger = logging.getLogger(__name__)

CSV_HEADER = "股票代號,股票名稱,價格,張數\n"


@dataclass(frozen=True)
class StockStats:
    """Highest and lowest deal price and total traded quantity of one stock."""

    max_price: float
    min_price: float
    total_volume: int


class Database:
    """Basic information and deal history, keyed by six-character stock code."""

    def __init__(self) -> None:
        self.stock_info: dict[str, StockBasicInfo] = {}
        self.deal_history: dict[str, list[PriceVolume]] = {}

    @staticmethod
    def _key(code: str | bytes) -> str:
        return fixed_key(code, STOCK_CODE_WIDTH)

    def load(self, results: Iterable[object]) -> None:
        """Add Format 1 and Format 6 results; other objects are ignored."""
        for result in results:
            if isinstance(result, StockBasicInfo):
                self.stock_info[self._key(result.stock_info.stock_code)] = result
            elif isinstance(result, RealtimeQuote) and result.deal_prices:
                key = self._key(result.stock_code)
                self.deal_history.setdefault(key, []).extend(result.deal_prices)
        logger.info("stock basic information for %d stocks", len(self.stock_info))
        logger.info("deal history for %d stocks", len(self.deal_history))

    def query_format1(self, code: str) -> StockBasicInfo | None:
        """The basic information of ``code``, or None if unknown."""
        return self.stock_info.get(self._key(code))

    def query_format6(self, code: str) -> list[PriceVolume]:
        """The deals recorded for ``code`` in arrival order (empty if none)."""
        return list(self.deal_history.get(self._key(code), ()))

    def summarize(self, code: str) -> StockStats:
        """Price range and total volume of the deals recorded for ``code``."""
        history = self.deal_history.get(self._key(code), [])
        if not history:
            return StockStats(max_price=0.0, min_price=0.0, total_volume=0)
        prices = [tick.price.to_float(2) for tick in history]
        return StockStats(
            max_price=max(prices),
            min_price=min(prices),
            total_volume=sum(tick.quantity.to_int() for tick in history),
        )

    def write_to_file(self, path: str | Path) -> None:
        """Write a readable dump of all basic information and deal history."""
        with open(path, "w", encoding="utf-8") as out:
            out.write("=== 股票基本資料 ===\n")
            for info in self.stock_info.values():
                stock = info.stock_info
                out.write(
                    f"股票代號: {stock.stock_code}"
                    f" | 名稱: {stock.name}"
                    f" | 參考價: {stock.ref_price.to_float(2):g}"
                    f" | 漲停: {stock.up_limit.to_float(2):g}"
                    f" | 跌停: {stock.down_limit.to_float(2):g}\n"
                )
            out.write("\n=== 成交歷史紀錄 ===\n")
            for code, history in self.deal_history.items():
                out.write(f"股票代號: {code.rstrip(chr(0))}\n")
                for tick in history:
                    out.write(
                        f"  成交價: {tick.price.to_float(2):g}"
                        f" | 成交量: {tick.quantity.to_int()}\n"
                    )
        logger.info("wrote %s", path)

    def export_history_csv(
        self, code: str, filename: str | Path | None = None
    ) -> Path:
        """Write the deal history of ``code`` as UTF-8 CSV with a BOM.

        Without ``filename`` the file is ``<code>_history.csv`` in the
        working directory.  Raises KeyError if the stock has no deals.
        """
        history = self.deal_history.get(self._key(code))
        if history is None:
            raise KeyError(f"no deal history for stock code {code!r}")
        clean = code.rstrip(" ")
        path = Path(filename) if filename is not None else Path(f"{clean}_history.csv")
        info = self.query_format1(code)
        name = info.stock_info.name if info is not None else ""
        with path.open("w", encoding="utf-8-sig", newline="") as out:
            out.write(CSV_HEADER)
            for tick in history:
                out.write(
                    f"{clean},{name},{tick.price.to_float(2):.2f},"
                    f"{tick.quantity.to_int()}\n"
                )
        logger.info("exported CSV %s", path)
        return path