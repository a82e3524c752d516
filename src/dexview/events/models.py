"""Raw exchange event model and the display enums shared by every view."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel

ETHER_ADDRESS = "0x0000000000000000000000000000000000000000"


class DisplayClass(str, Enum):
    """CSS class names used by the UI for coloring."""

    GREEN = "success"
    RED = "danger"


class OrderType(str, Enum):
    BUY = "buy"
    SELL = "sell"

    @property
    def opposite(self) -> "OrderType":
        return OrderType.SELL if self is OrderType.BUY else OrderType.BUY

    @property
    def display_class(self) -> DisplayClass:
        return DisplayClass.GREEN if self is OrderType.BUY else DisplayClass.RED

    @property
    def sign(self) -> str:
        """'+' for buys (tokens received), '-' for sells."""
        return "+" if self is OrderType.BUY else "-"


class PriceDirection(str, Enum):
    """Direction of a trade's price relative to the previous trade."""

    UP = "up"
    DOWN = "down"

    @property
    def display_class(self) -> DisplayClass:
        return DisplayClass.GREEN if self is PriceDirection.UP else DisplayClass.RED


class RawEvent(BaseModel):
    """An order, cancel, or fill event as read from the exchange contract.

    Amounts are integers in the token's smallest unit (wei for ether).
    Numeric strings are accepted, since contract event values usually
    arrive that way.
    """

    id: int | str = Field(description="Order id, unique across event kinds")
    user: str = Field(description="Address that created the order")
    user_fill: str | None = Field(default=None, description="Address that filled it")
    token_get: str = Field(description="Token the maker wants")
    amount_get: int = Field(ge=0, description="Amount wanted, smallest unit")
    token_give: str = Field(description="Token the maker offers")
    amount_give: int = Field(ge=0, description="Amount offered, smallest unit")
    timestamp: int = Field(description="Block time in unix seconds")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: object) -> object:
        """Decimal-digit strings become ints so "7" and 7 are the same order."""
        if isinstance(value, str) and value.strip().isdecimal():
            return int(value)
        return value

    def maker_side(self, ether_address: str = ETHER_ADDRESS) -> OrderType:
        """Buy if the maker gives ether for tokens, sell otherwise."""
        if self.token_give == ether_address:
            return OrderType.BUY
        return OrderType.SELL

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "alias_generator": to_camel,
    }
