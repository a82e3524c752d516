"""Account-scoped views: my trades and my open orders.

A fill is seen from two sides.  The maker (``user``) did what their order
says; the taker (``user_fill``) did the opposite, so a maker's buy is the
taker's sell.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dexview.config import DEFAULT_CONFIG, DexviewConfig
from dexview.events.models import DisplayClass, OrderType, RawEvent
from dexview.views.decorate import DecoratedOrder, decorate_all

logger = logging.getLogger(__name__)


class UserTradeRecord(DecoratedOrder):
    """A decorated order with its type as seen by one account."""

    order_type: OrderType
    order_type_class: DisplayClass
    order_sign: str


def _for_account(order: DecoratedOrder, order_type: OrderType) -> UserTradeRecord:
    return UserTradeRecord(
        **order.model_dump(include=set(DecoratedOrder.model_fields)),
        order_type=order_type,
        order_type_class=order_type.display_class,
        order_sign=order_type.sign,
    )


def perspective_side(
    order: RawEvent, account: str, ether_address: str | None = None
) -> OrderType:
    """Order type from `account`'s point of view: direct for the maker, inverted for the taker."""
    side = order.maker_side(ether_address or DEFAULT_CONFIG.assets.ether_address)
    return side if order.user == account else side.opposite


def my_trades(
    filled: Iterable[RawEvent],
    account: str | None,
    config: DexviewConfig | None = None,
) -> list[UserTradeRecord]:
    """Fills where the account was maker or taker, oldest first."""
    if not account:
        return []
    cfg = config or DEFAULT_CONFIG
    mine = [o for o in filled if o.user == account or o.user_fill == account]
    mine.sort(key=lambda o: o.timestamp)
    records = [
        _for_account(o, perspective_side(o, account, cfg.assets.ether_address))
        for o in decorate_all(mine, cfg)
    ]
    logger.debug("My trades for %s: %d", account, len(records))
    return records


def my_open_orders(
    open_orders: Iterable[RawEvent],
    account: str | None,
    config: DexviewConfig | None = None,
) -> list[UserTradeRecord]:
    """Open orders placed by the account, newest first.

    An open order has no counterparty yet, so its type is always the maker's.
    """
    if not account:
        return []
    cfg = config or DEFAULT_CONFIG
    mine = [o for o in open_orders if o.user == account]
    records = [
        _for_account(o, o.maker_side(cfg.assets.ether_address))
        for o in decorate_all(mine, cfg)
    ]
    records.sort(key=lambda r: r.timestamp, reverse=True)
    logger.debug("My open orders for %s: %d", account, len(records))
    return records
