"""View derivation layer — turns raw exchange events into display-ready views."""

from dexview.views.candles import OHLCPoint, PriceChart, build_candles, build_series
from dexview.views.colorize import TradeRecord, color_step, colorize
from dexview.views.decorate import DecoratedOrder, decorate, decorate_all
from dexview.views.history import build_history
from dexview.views.order_book import OrderBook, OrderBookEntry, build_book, open_orders
from dexview.views.user import UserTradeRecord, my_open_orders, my_trades

__all__ = [
    # Decoration
    "DecoratedOrder",
    "decorate",
    "decorate_all",
    # Trade coloring and history
    "TradeRecord",
    "build_history",
    "color_step",
    "colorize",
    # Order book
    "OrderBook",
    "OrderBookEntry",
    "build_book",
    "open_orders",
    # Account views
    "UserTradeRecord",
    "my_open_orders",
    "my_trades",
    # Price chart
    "OHLCPoint",
    "PriceChart",
    "build_candles",
    "build_series",
]
