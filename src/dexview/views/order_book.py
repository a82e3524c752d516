"""Order book: open orders split into bid and ask sides."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from dexview.config import DEFAULT_CONFIG, DexviewConfig
from dexview.events.models import DisplayClass, OrderType, RawEvent
from dexview.views.decorate import DecoratedOrder, decorate_all

logger = logging.getLogger(__name__)


class OrderBookEntry(DecoratedOrder):
    """An open order classified for the order book."""

    order_type: OrderType
    order_type_class: DisplayClass
    order_fill_class: OrderType = Field(description="Action a taker performs to fill it")


class OrderBook(BaseModel):
    """Bids best-first and asks best-first."""

    buy_orders: list[OrderBookEntry] = Field(default_factory=list)
    sell_orders: list[OrderBookEntry] = Field(default_factory=list)

    model_config = {"frozen": True, "populate_by_name": True, "alias_generator": to_camel}


def open_orders(
    all_orders: Sequence[RawEvent],
    filled: Iterable[RawEvent],
    cancelled: Iterable[RawEvent],
) -> list[RawEvent]:
    """Orders that are neither filled nor cancelled, in their original order."""
    closed_ids = {o.id for o in filled}
    closed_ids.update(o.id for o in cancelled)
    return [o for o in all_orders if o.id not in closed_ids]


def classify(order: DecoratedOrder, config: DexviewConfig | None = None) -> OrderBookEntry:
    cfg = config or DEFAULT_CONFIG
    order_type = order.maker_side(cfg.assets.ether_address)
    return OrderBookEntry(
        **order.model_dump(include=set(DecoratedOrder.model_fields)),
        order_type=order_type,
        order_type_class=order_type.display_class,
        order_fill_class=order_type.opposite,
    )


def build_book(
    all_orders: Sequence[RawEvent],
    filled: Iterable[RawEvent],
    cancelled: Iterable[RawEvent],
    config: DexviewConfig | None = None,
) -> OrderBook:
    """Build the order book from the three event collections.

    Bids are sorted by price descending.  Asks are sorted ascending (lowest
    ask first) unless display.sell_side_order is "descending".
    """
    cfg = config or DEFAULT_CONFIG
    decorated = decorate_all(open_orders(all_orders, filled, cancelled), cfg)
    entries = [classify(o, cfg) for o in decorated]

    buys = [e for e in entries if e.order_type is OrderType.BUY]
    sells = [e for e in entries if e.order_type is OrderType.SELL]
    buys.sort(key=lambda e: e.token_price, reverse=True)
    sells.sort(
        key=lambda e: e.token_price,
        reverse=cfg.display.sell_side_order == "descending",
    )

    logger.debug("Order book: %d bids, %d asks", len(buys), len(sells))
    return OrderBook(buy_orders=buys, sell_orders=sells)
