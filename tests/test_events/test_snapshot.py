"""Tests for the state snapshot and its defaulted lookups."""

import pytest
from pydantic import ValidationError

from dexview.events.models import ETHER_ADDRESS
from dexview.events.snapshot import StateSnapshot, lookup

TOKEN = "0xToken"


def _event(order_id: int) -> dict:
    return {
        "id": order_id,
        "user": "0xMaker",
        "tokenGet": TOKEN,
        "amountGet": 10,
        "tokenGive": ETHER_ADDRESS,
        "amountGive": 20,
        "timestamp": 1_700_000_000 + order_id,
    }


class TestLookup:
    def test_nested_path(self):
        assert lookup({"a": {"b": {"c": 3}}}, "a.b.c") == 3

    def test_missing_path_returns_default(self):
        assert lookup({"a": {}}, "a.b.c", "default") == "default"

    def test_non_mapping_segment_returns_default(self):
        assert lookup({"a": [1, 2]}, "a.b", False) is False

    def test_none_value_returns_default(self):
        assert lookup({"a": None}, "a", ()) == ()

    def test_falsy_value_is_kept(self):
        assert lookup({"a": 0}, "a", 5) == 0


class TestStateSnapshot:
    def test_empty_state_defaults(self):
        snap = StateSnapshot.from_state({})
        assert snap.account is None
        assert snap.token_loaded is False
        assert snap.exchange_loaded is False
        assert snap.exchange_contract is None
        assert snap.all_orders == ()
        assert snap.cancelled_orders == ()
        assert snap.filled_orders == ()
        assert snap.contracts_loaded is False
        assert snap.order_book_loaded is False

    def test_full_state(self):
        contract = object()
        state = {
            "web3": {"account": "0xMe"},
            "token": {"loaded": True},
            "exchange": {
                "loaded": True,
                "contract": contract,
                "allOrders": {"loaded": True, "data": [_event(1), _event(2)]},
                "cancelledOrders": {"loaded": True, "data": [_event(2)]},
                "filledOrders": {"loaded": True, "data": []},
            },
        }
        snap = StateSnapshot.from_state(state)
        assert snap.account == "0xMe"
        assert snap.exchange_contract is contract
        assert [o.id for o in snap.all_orders] == [1, 2]
        assert [o.id for o in snap.cancelled_orders] == [2]
        assert snap.contracts_loaded is True
        assert snap.order_book_loaded is True

    def test_contracts_need_both_loaded(self):
        snap = StateSnapshot.from_state({"token": {"loaded": True}})
        assert snap.contracts_loaded is False

    def test_order_book_needs_all_collections(self):
        state = {
            "exchange": {
                "allOrders": {"loaded": True},
                "filledOrders": {"loaded": True},
            }
        }
        assert StateSnapshot.from_state(state).order_book_loaded is False

    def test_invalid_event_raises(self):
        state = {"exchange": {"allOrders": {"data": [{"id": 1}]}}}
        with pytest.raises(ValidationError):
            StateSnapshot.from_state(state)

    def test_collections_are_immutable(self):
        snap = StateSnapshot.from_state({"exchange": {"allOrders": {"data": [_event(1)]}}})
        assert isinstance(snap.all_orders, tuple)
