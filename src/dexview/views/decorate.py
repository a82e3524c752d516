"""Order decoration: enrich a raw event with price and display fields.

Every downstream view starts here.  The currency side and the token side of
an order are decided only by which token address is the ether sentinel,
never by whether the field is the "get" or the "give" half.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import UTC, datetime, tzinfo
from decimal import ROUND_HALF_UP, Context, Decimal
from zoneinfo import ZoneInfo

from pydantic import Field

from dexview.config import DEFAULT_CONFIG, DexviewConfig
from dexview.errors import MalformedOrder
from dexview.events.models import RawEvent

logger = logging.getLogger(__name__)

# Wide enough for uint256 amounts and their ratios.
_CTX = Context(prec=100)


class DecoratedOrder(RawEvent):
    """A raw event plus its economic and display fields."""

    ether_amount: Decimal = Field(description="Currency side, in whole ether")
    token_amount: Decimal = Field(description="Token side, in whole tokens")
    token_price: Decimal = Field(description="Ether per token, rounded")
    formatted_timestamp: str = Field(description="Human-readable local time")


def scale_amount(amount: int, decimals: int) -> Decimal:
    """Convert an integer amount in the smallest unit to whole units."""
    return Decimal(amount).scaleb(-decimals, context=_CTX)


def token_price(
    ether_amount: int | Decimal, token_amount: int | Decimal, precision: int = 5
) -> Decimal:
    """Ether per token, rounded half-up to `precision` decimal places.

    Pass whole-unit amounts so the ratio holds when ether and token use
    different decimals.  A zero token_amount raises decimal.DivisionByZero;
    decorate() rejects that case first.
    """
    ratio = _CTX.divide(Decimal(ether_amount), Decimal(token_amount))
    return ratio.quantize(Decimal(1).scaleb(-precision), rounding=ROUND_HALF_UP, context=_CTX)


def _display_zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return UTC
    return ZoneInfo(name)


def format_timestamp(timestamp: int, zone: str = "UTC") -> str:
    """Format unix seconds as e.g. '2:05:09 pm 3/1' (hour:min:sec am/pm day/month)."""
    dt = datetime.fromtimestamp(timestamp, tz=_display_zone(zone))
    hour = dt.hour % 12 or 12
    meridiem = "am" if dt.hour < 12 else "pm"
    return f"{hour}:{dt:%M:%S} {meridiem} {dt.day}/{dt.month}"


def decorate(order: RawEvent, config: DexviewConfig | None = None) -> DecoratedOrder:
    """Attach ether/token amounts, token price and a formatted timestamp.

    Raises:
        MalformedOrder: if the token side of the order is zero.
    """
    cfg = config or DEFAULT_CONFIG
    assets = cfg.assets

    if order.token_give == assets.ether_address:
        ether_raw, token_raw = order.amount_give, order.amount_get
    else:
        ether_raw, token_raw = order.amount_get, order.amount_give

    if token_raw == 0:
        raise MalformedOrder(order.id, "token amount is zero, price is undefined")

    ether_amount = scale_amount(ether_raw, assets.ether_decimals)
    token_amount = scale_amount(token_raw, assets.token_decimals)
    return DecoratedOrder(
        **order.model_dump(include=set(RawEvent.model_fields)),
        ether_amount=ether_amount,
        token_amount=token_amount,
        token_price=token_price(ether_amount, token_amount, assets.price_precision),
        formatted_timestamp=format_timestamp(order.timestamp, cfg.display.timezone),
    )


def decorate_all(
    orders: Iterable[RawEvent], config: DexviewConfig | None = None
) -> list[DecoratedOrder]:
    """Decorate orders in sequence, dropping any that are malformed."""
    decorated: list[DecoratedOrder] = []
    for order in orders:
        try:
            decorated.append(decorate(order, config))
        except MalformedOrder as exc:
            logger.warning("Skipping order: %s", exc)
    return decorated
