"""Global trade history, newest first."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from dexview.config import DexviewConfig
from dexview.events.models import RawEvent
from dexview.views.colorize import TradeRecord, colorize
from dexview.views.decorate import decorate_all

logger = logging.getLogger(__name__)


def build_history(
    filled: Iterable[RawEvent], config: DexviewConfig | None = None
) -> list[TradeRecord]:
    """Colorize fills in ascending time order, then return them newest first.

    Colors must be assigned on the ascending pass; coloring after the
    descending sort would compare each trade against a later one.
    """
    ascending = sorted(filled, key=lambda o: o.timestamp)
    colored = colorize(decorate_all(ascending, config))
    history = sorted(colored, key=lambda t: t.timestamp, reverse=True)
    logger.debug("Trade history: %d trades", len(history))
    return history
