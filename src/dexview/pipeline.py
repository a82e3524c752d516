"""Derivation pipeline — every view the UI needs from one state snapshot.

The functions here are pure: they read a snapshot and return fresh view
objects.  Caching between state updates is the caller's concern; because
nothing is mutated, memoizing on the identity of the snapshot's collections
is safe.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from dexview.config import DEFAULT_CONFIG, DexviewConfig
from dexview.events.snapshot import StateSnapshot
from dexview.views.candles import PriceChart, build_series
from dexview.views.colorize import TradeRecord
from dexview.views.history import build_history
from dexview.views.order_book import OrderBook, build_book, open_orders
from dexview.views.user import UserTradeRecord, my_open_orders, my_trades

logger = logging.getLogger(__name__)


class DerivedViews(BaseModel):
    """All derived views for one snapshot."""

    order_book: OrderBook = Field(default_factory=OrderBook)
    trade_history: list[TradeRecord] = Field(default_factory=list)
    my_trades: list[UserTradeRecord] = Field(default_factory=list)
    my_open_orders: list[UserTradeRecord] = Field(default_factory=list)
    price_chart: PriceChart = Field(default_factory=PriceChart)

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}


def derive_views(
    snapshot: StateSnapshot | Mapping[str, Any],
    config: DexviewConfig | None = None,
) -> DerivedViews:
    """Compute every view from a snapshot (or a raw nested state mapping)."""
    if not isinstance(snapshot, StateSnapshot):
        snapshot = StateSnapshot.from_state(snapshot)
    cfg = config or DEFAULT_CONFIG

    open_set = open_orders(
        snapshot.all_orders, snapshot.filled_orders, snapshot.cancelled_orders
    )
    logger.info(
        "Deriving views: %d open of %d orders, %d fills",
        len(open_set),
        len(snapshot.all_orders),
        len(snapshot.filled_orders),
    )

    return DerivedViews(
        order_book=build_book(open_set, (), (), cfg),
        trade_history=build_history(snapshot.filled_orders, cfg),
        my_trades=my_trades(snapshot.filled_orders, snapshot.account, cfg),
        my_open_orders=my_open_orders(open_set, snapshot.account, cfg),
        price_chart=build_series(snapshot.filled_orders, cfg),
    )
