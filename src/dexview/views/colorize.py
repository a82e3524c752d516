"""Trade coloring: mark each trade green or red against the one before it."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import Field

from dexview.events.models import DisplayClass, PriceDirection
from dexview.views.decorate import DecoratedOrder


class TradeRecord(DecoratedOrder):
    """A decorated fill with its price direction."""

    price_direction: PriceDirection = Field(description="Move versus the previous trade")

    @property
    def token_price_class(self) -> DisplayClass:
        return self.price_direction.display_class


def color_step(previous: TradeRecord | None, trade: DecoratedOrder) -> TradeRecord:
    """Color one trade given the last colored trade (None for the first).

    The first trade has nothing to compare against and is always UP.
    Equal prices count as UP.
    """
    if previous is None or trade.token_price >= previous.token_price:
        direction = PriceDirection.UP
    else:
        direction = PriceDirection.DOWN
    fields = trade.model_dump(include=set(DecoratedOrder.model_fields))
    return TradeRecord(**fields, price_direction=direction)


def colorize(trades: Iterable[DecoratedOrder]) -> list[TradeRecord]:
    """Color trades that are already in ascending time order.

    Each step compares against the previously colored record, and the output
    keeps the input order.
    """
    colored: list[TradeRecord] = []
    previous: TradeRecord | None = None
    for trade in trades:
        previous = color_step(previous, trade)
        colored.append(previous)
    return colored
