"""Read-only view over the application state the pipeline derives from.

The state is a nested mapping kept by the UI (web3 account, token and
exchange contracts, and the three event collections).  Every read goes
through a defaulted path lookup, because a missing path nearly always
means "not loaded yet" rather than corrupt data.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field

from dexview.events.models import RawEvent

logger = logging.getLogger(__name__)

_MISSING = object()


def lookup(state: Any, path: str, default: Any = None) -> Any:
    """Resolve a dotted path like 'exchange.allOrders.data' in nested mappings.

    Returns default when any segment is absent, when an intermediate value
    is not a mapping, or when the final value is None.
    """
    current = state
    for key in path.split("."):
        if not isinstance(current, Mapping):
            return default
        current = current.get(key, _MISSING)
        if current is _MISSING:
            return default
    return default if current is None else current


class StateSnapshot(BaseModel):
    """Immutable snapshot of everything the derived views depend on."""

    account: str | None = None
    token_loaded: bool = False
    exchange_loaded: bool = False
    exchange_contract: Any = None
    all_orders_loaded: bool = False
    all_orders: tuple[RawEvent, ...] = Field(default_factory=tuple)
    cancelled_orders_loaded: bool = False
    cancelled_orders: tuple[RawEvent, ...] = Field(default_factory=tuple)
    filled_orders_loaded: bool = False
    filled_orders: tuple[RawEvent, ...] = Field(default_factory=tuple)

    @property
    def contracts_loaded(self) -> bool:
        return self.token_loaded and self.exchange_loaded

    @property
    def order_book_loaded(self) -> bool:
        """True once all three event collections have been fetched."""
        return (
            self.all_orders_loaded
            and self.cancelled_orders_loaded
            and self.filled_orders_loaded
        )

    @classmethod
    def from_state(cls, state: Mapping[str, Any]) -> StateSnapshot:
        """Build a snapshot from the nested UI state mapping."""
        snapshot = cls.model_validate(
            {
                "account": lookup(state, "web3.account"),
                "token_loaded": lookup(state, "token.loaded", False),
                "exchange_loaded": lookup(state, "exchange.loaded", False),
                "exchange_contract": lookup(state, "exchange.contract"),
                "all_orders_loaded": lookup(state, "exchange.allOrders.loaded", False),
                "all_orders": lookup(state, "exchange.allOrders.data", ()),
                "cancelled_orders_loaded": lookup(
                    state, "exchange.cancelledOrders.loaded", False
                ),
                "cancelled_orders": lookup(state, "exchange.cancelledOrders.data", ()),
                "filled_orders_loaded": lookup(state, "exchange.filledOrders.loaded", False),
                "filled_orders": lookup(state, "exchange.filledOrders.data", ()),
            }
        )
        logger.debug(
            "Snapshot: %d orders, %d cancelled, %d filled (account=%s)",
            len(snapshot.all_orders),
            len(snapshot.cancelled_orders),
            len(snapshot.filled_orders),
            snapshot.account,
        )
        return snapshot

    model_config = {"frozen": True}
