"""Exceptions raised by the derivation pipeline."""


class MalformedOrder(ValueError):
    """A raw event whose amounts cannot produce a token price.

    Raised at decoration time. Builders catch it and drop the record
    from their output instead of letting an infinite price reach a sort.
    """

    def __init__(self, order_id: int | str, reason: str) -> None:
        super().__init__(f"Malformed order {order_id!r}: {reason}")
        self.order_id = order_id
        self.reason = reason
