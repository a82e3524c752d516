"""Tests for the candlestick aggregator and price chart.

Trades are hand-crafted with known prices so every OHLC value can be
checked exactly.
"""

from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest

from dexview.config import DexviewConfig, DisplayConfig
from dexview.events.models import ETHER_ADDRESS, RawEvent
from dexview.views.candles import CandleAccumulator, bucket_start, build_series
from dexview.views.decorate import decorate

TOKEN = "0xToken"
WEI = 10**18
BASE_TIME = datetime(2026, 2, 10, 14, 0, 0, tzinfo=UTC)


def _fill(offset_sec: int, price: str, tokens: int = 1, order_id: int | None = None) -> RawEvent:
    return RawEvent(
        id=order_id if order_id is not None else offset_sec,
        user="0xMaker",
        user_fill="0xTaker",
        token_get=TOKEN,
        amount_get=tokens * WEI,
        token_give=ETHER_ADDRESS,
        amount_give=int(Decimal(price) * tokens * WEI),
        timestamp=int((BASE_TIME + timedelta(seconds=offset_sec)).timestamp()),
    )


class TestBucketStart:
    def test_truncates_to_hour(self):
        ts = int(datetime(2026, 2, 10, 14, 59, 59, tzinfo=UTC).timestamp())
        assert bucket_start(ts) == int(BASE_TIME.timestamp())

    def test_on_boundary(self):
        ts = int(BASE_TIME.timestamp())
        assert bucket_start(ts) == ts

    def test_custom_interval(self):
        assert bucket_start(1_000, interval=300) == 900


class TestCandleAccumulator:
    def test_ohlc(self):
        acc = CandleAccumulator()
        for i, price in enumerate(["10", "12", "9", "11"]):
            acc.add(decorate(_fill(i, price)))
        point = acc.to_point(BASE_TIME)
        assert point.open == Decimal("10")
        assert point.high == Decimal("12")
        assert point.low == Decimal("9")
        assert point.close == Decimal("11")
        assert point.trade_count == 4
        assert point.volume == Decimal("4")

    def test_empty_accumulator_cannot_emit(self):
        with pytest.raises(AssertionError):
            CandleAccumulator().to_point(BASE_TIME)


class TestBuildSeries:
    def test_single_bucket_ohlc(self):
        fills = [_fill(0, "10"), _fill(60, "12"), _fill(120, "9"), _fill(180, "11")]
        [point] = build_series(fills).points
        assert point.time == BASE_TIME
        assert (point.open, point.high, point.low, point.close) == (
            Decimal("10"),
            Decimal("12"),
            Decimal("9"),
            Decimal("11"),
        )

    def test_buckets_by_hour_in_ascending_order(self):
        fills = [
            _fill(7200 + 5, "3"),  # 16:00
            _fill(10, "1"),  # 14:00
            _fill(3600 + 1, "2"),  # 15:00
            _fill(3600 + 2, "4"),  # 15:00
        ]
        points = build_series(fills).points
        assert [p.time for p in points] == [
            BASE_TIME,
            BASE_TIME + timedelta(hours=1),
            BASE_TIME + timedelta(hours=2),
        ]
        assert points[1].open == Decimal("2")
        assert points[1].close == Decimal("4")
        assert points[1].trade_count == 2

    def test_open_and_close_follow_time_not_input_order(self):
        fills = [_fill(30, "5"), _fill(10, "7"), _fill(20, "6")]
        [point] = build_series(fills).points
        assert point.open == Decimal("7")
        assert point.close == Decimal("5")

    def test_empty_hours_produce_no_candle(self):
        fills = [_fill(0, "1"), _fill(5 * 3600, "2")]
        assert len(build_series(fills).points) == 2

    def test_custom_interval(self):
        cfg = DexviewConfig(display=DisplayConfig(candle_interval=300))
        fills = [_fill(0, "1"), _fill(299, "2"), _fill(300, "3")]
        points = build_series(fills, cfg).points
        assert len(points) == 2
        assert points[0].trade_count == 2

    def test_last_price_up(self):
        chart = build_series([_fill(0, "1"), _fill(10, "2")])
        assert chart.last_price == Decimal("2")
        assert chart.last_price_change == "+"

    def test_last_price_down(self):
        chart = build_series([_fill(0, "2"), _fill(10, "1.5")])
        assert chart.last_price == Decimal("1.5")
        assert chart.last_price_change == "-"

    def test_last_price_unchanged_is_up(self):
        chart = build_series([_fill(0, "2"), _fill(10, "2")])
        assert chart.last_price_change == "+"

    def test_last_price_spans_buckets(self):
        # The last two trades sit in different candles.
        chart = build_series([_fill(0, "5"), _fill(3600, "4")])
        assert chart.last_price == Decimal("4")
        assert chart.last_price_change == "-"

    def test_single_trade(self):
        chart = build_series([_fill(0, "3")])
        assert chart.last_price == Decimal("3")
        assert chart.last_price_change == "+"
        assert len(chart.points) == 1

    def test_empty(self):
        chart = build_series([])
        assert chart.last_price == Decimal("0")
        assert chart.last_price_change == "+"
        assert chart.points == []

    def test_to_series_shape(self):
        chart = build_series([_fill(0, "10"), _fill(60, "12"), _fill(120, "9"), _fill(180, "11")])
        series = chart.to_series()
        assert series == [
            {"data": [{"x": BASE_TIME.isoformat(), "y": [10.0, 12.0, 9.0, 11.0]}]}
        ]

    def test_serializes_camel_case(self):
        data = build_series([_fill(0, "1")]).model_dump(by_alias=True)
        assert set(data) == {"lastPrice", "lastPriceChange", "points"}
        assert "tradeCount" in data["points"][0]
