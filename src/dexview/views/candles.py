"""Price chart: time-bucketed OHLC candles from decorated fills.

Buckets are aligned to clock boundaries in UTC, so a 1h candle covers
:00-:59 of one hour.  Hours with no trades produce no candle.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from dexview.config import DEFAULT_CONFIG, DexviewConfig
from dexview.events.models import RawEvent
from dexview.views.decorate import DecoratedOrder, decorate_all

logger = logging.getLogger(__name__)


class OHLCPoint(BaseModel):
    """One candle."""

    time: datetime = Field(description="Bucket start, UTC")
    open: Decimal = Field(description="Price of the first trade")
    high: Decimal = Field(description="Highest price in the bucket")
    low: Decimal = Field(description="Lowest price in the bucket")
    close: Decimal = Field(description="Price of the last trade")
    volume: Decimal = Field(description="Total token amount traded")
    trade_count: int = Field(description="Number of trades in the bucket")

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}


class PriceChart(BaseModel):
    """Candles plus the latest price and whether it moved up or down."""

    last_price: Decimal = Decimal("0")
    last_price_change: str = "+"
    points: list[OHLCPoint] = Field(default_factory=list)

    def to_series(self) -> list[dict[str, Any]]:
        """Render in the charting widget's shape: [{"data": [{"x", "y": [o, h, l, c]}]}]."""
        data = [
            {
                "x": p.time.isoformat(),
                "y": [float(p.open), float(p.high), float(p.low), float(p.close)],
            }
            for p in self.points
        ]
        return [{"data": data}]

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}


class CandleAccumulator:
    """Tracks running OHLC state while building a single candle."""

    __slots__ = ("_open", "_high", "_low", "_close", "_volume", "trade_count")

    def __init__(self) -> None:
        self._open: Decimal | None = None
        self._high: Decimal | None = None
        self._low: Decimal | None = None
        self._close: Decimal | None = None
        self._volume: Decimal = Decimal("0")
        self.trade_count: int = 0

    def add(self, trade: DecoratedOrder) -> None:
        price = trade.token_price
        if self.trade_count == 0:
            self._open = price
            self._high = price
            self._low = price
        else:
            assert self._high is not None and self._low is not None
            self._high = max(self._high, price)
            self._low = min(self._low, price)
        self._close = price
        self._volume += trade.token_amount
        self.trade_count += 1

    def to_point(self, time: datetime) -> OHLCPoint:
        assert self.trade_count > 0, "Cannot create candle from empty accumulator"
        assert self._open is not None and self._close is not None
        assert self._high is not None and self._low is not None
        return OHLCPoint(
            time=time,
            open=self._open,
            high=self._high,
            low=self._low,
            close=self._close,
            volume=self._volume,
            trade_count=self.trade_count,
        )


def bucket_start(timestamp: int, interval: int = 3600) -> int:
    """Truncate unix seconds to the start of its bucket."""
    return timestamp - timestamp % interval


def build_candles(
    trades: Iterable[DecoratedOrder], interval: int = 3600
) -> list[OHLCPoint]:
    """Group ascending decorated trades into candles, in ascending bucket order."""
    buckets: dict[int, CandleAccumulator] = {}
    for trade in trades:
        key = bucket_start(trade.timestamp, interval)
        buckets.setdefault(key, CandleAccumulator()).add(trade)
    return [
        buckets[key].to_point(datetime.fromtimestamp(key, tz=UTC))
        for key in sorted(buckets)
    ]


def build_series(
    filled: Iterable[RawEvent], config: DexviewConfig | None = None
) -> PriceChart:
    """Build the price chart from filled orders.

    The last price and its change compare the two most recent trades overall,
    not per candle.  With a single trade the previous price counts as 0, and
    with no trades both are 0.
    """
    cfg = config or DEFAULT_CONFIG
    trades = decorate_all(sorted(filled, key=lambda o: o.timestamp), cfg)

    last_price = trades[-1].token_price if trades else Decimal("0")
    second_last_price = trades[-2].token_price if len(trades) >= 2 else Decimal("0")
    points = build_candles(trades, cfg.display.candle_interval)

    logger.debug("Price chart: %d candles from %d trades", len(points), len(trades))
    return PriceChart(
        last_price=last_price,
        last_price_change="+" if last_price >= second_last_price else "-",
        points=points,
    )
