"""dexview CLI — inspect the derived exchange views from a state snapshot."""

from __future__ import annotations

import json
import logging
import sys
import tomllib
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, ValidationError

from dexview.config import DexviewConfig
from dexview.events.snapshot import StateSnapshot
from dexview.pipeline import derive_views
from dexview.views.candles import build_series
from dexview.views.history import build_history
from dexview.views.order_book import OrderBookEntry, build_book, open_orders
from dexview.views.user import UserTradeRecord, my_open_orders, my_trades

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def _setup_logging(log_level: str) -> None:
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
    )


def _load_snapshot(path: str) -> StateSnapshot:
    try:
        with open(path, encoding="utf-8") as f:
            state = json.load(f)
        return StateSnapshot.from_state(state)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        click.echo(f"Failed to load snapshot: {exc}", err=True)
        raise SystemExit(1)


def _dump(value: BaseModel | list[BaseModel] | dict[str, Any]) -> str:
    if isinstance(value, BaseModel):
        data = value.model_dump(mode="json", by_alias=True)
    elif isinstance(value, list):
        data = [v.model_dump(mode="json", by_alias=True) for v in value]
    else:
        data = value
    return json.dumps(data, indent=2)


def _book_line(entry: OrderBookEntry) -> str:
    return (
        f"  {entry.token_price:>12}  {entry.token_amount:>14}  {entry.ether_amount:>14}"
        f"  {entry.order_type.value:<4}  #{entry.id}"
    )


def _user_line(record: UserTradeRecord) -> str:
    return (
        f"  {record.formatted_timestamp:<20}  {record.order_sign}{record.token_amount:<14}"
        f"  {record.token_price:>12}  {record.order_type.value}"
    )


@click.group()
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    help="Set logging verbosity.",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True),
    default=None,
    help="Path to dexview.toml config file.",
)
@click.pass_context
def cli(ctx: click.Context, log_level: str, config_path: str | None) -> None:
    """dexview - Order book, trade history and price chart from exchange events.

    \b
    SNAPSHOT is a JSON file holding the UI state:
      {"web3": {"account": "0x..."},
       "exchange": {"allOrders": {"loaded": true, "data": [...]},
                    "cancelledOrders": {...}, "filledOrders": {...}}}

    \b
    Quick start:
      dexview book state.json                   Show the order book
      dexview trades state.json                 Show the trade history
      dexview mine state.json --account 0xabc   Show one account's orders
      dexview chart state.json                  Show hourly candles
    """
    _setup_logging(log_level)
    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = DexviewConfig.find_and_load(config_path)
    except (OSError, tomllib.TOMLDecodeError, ValidationError) as exc:
        click.echo(f"Failed to load config: {exc}", err=True)
        raise SystemExit(1)


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_context
def book(ctx: click.Context, snapshot: Path, as_json: bool) -> None:
    """Show open orders, best bid and best ask first."""
    state = _load_snapshot(str(snapshot))
    order_book = build_book(
        state.all_orders, state.filled_orders, state.cancelled_orders, ctx.obj["config"]
    )
    if as_json:
        click.echo(_dump(order_book))
        return

    click.echo(f"Sell orders ({len(order_book.sell_orders)})")
    for entry in order_book.sell_orders:
        click.echo(_book_line(entry))
    click.echo(f"Buy orders ({len(order_book.buy_orders)})")
    for entry in order_book.buy_orders:
        click.echo(_book_line(entry))


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_context
def trades(ctx: click.Context, snapshot: Path, as_json: bool) -> None:
    """Show filled trades, newest first."""
    state = _load_snapshot(str(snapshot))
    history = build_history(state.filled_orders, ctx.obj["config"])
    if as_json:
        click.echo(_dump(history))
        return

    if not history:
        click.echo("No trades yet.")
        return
    for trade in history:
        click.echo(
            f"  {trade.formatted_timestamp:<20}  {trade.token_amount:>14}"
            f"  {trade.token_price:>12}  {trade.price_direction.value}"
        )


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--account", default=None, help="Account address (default: web3.account).")
@click.option("--json", "as_json", is_flag=True, default=False, help="Print JSON.")
@click.pass_context
def mine(ctx: click.Context, snapshot: Path, account: str | None, as_json: bool) -> None:
    """Show one account's trades and open orders.

    \b
    Examples:
      dexview mine state.json
      dexview mine state.json --account 0x90F8bf6A479f320ead074411a4B0e7944Ea8c9C1
    """
    state = _load_snapshot(str(snapshot))
    config = ctx.obj["config"]
    account = account or state.account
    if not account:
        click.echo("No account given and none in the snapshot.", err=True)
        raise SystemExit(1)

    filled = my_trades(state.filled_orders, account, config)
    open_set = open_orders(state.all_orders, state.filled_orders, state.cancelled_orders)
    pending = my_open_orders(open_set, account, config)
    if as_json:
        click.echo(
            _dump(
                {
                    "myTrades": [r.model_dump(mode="json", by_alias=True) for r in filled],
                    "myOpenOrders": [r.model_dump(mode="json", by_alias=True) for r in pending],
                }
            )
        )
        return

    click.echo(f"Account: {account}")
    click.echo(f"  Trades ({len(filled)})")
    for record in filled:
        click.echo("  " + _user_line(record))
    click.echo(f"  Open orders ({len(pending)})")
    for record in pending:
        click.echo("  " + _user_line(record))


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, default=False, help="Print chart series JSON.")
@click.pass_context
def chart(ctx: click.Context, snapshot: Path, as_json: bool) -> None:
    """Show OHLC candles and the last traded price."""
    state = _load_snapshot(str(snapshot))
    price_chart = build_series(state.filled_orders, ctx.obj["config"])
    if as_json:
        click.echo(
            _dump(
                {
                    "lastPrice": float(price_chart.last_price),
                    "lastPriceChange": price_chart.last_price_change,
                    "series": price_chart.to_series(),
                }
            )
        )
        return

    click.echo(f"Last price: {price_chart.last_price_change}{price_chart.last_price}")
    for point in price_chart.points:
        click.echo(
            f"  {point.time.isoformat()}  O {point.open}  H {point.high}"
            f"  L {point.low}  C {point.close}  ({point.trade_count} trades)"
        )


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def views(ctx: click.Context, snapshot: Path) -> None:
    """Dump every derived view as JSON."""
    state = _load_snapshot(str(snapshot))
    click.echo(_dump(derive_views(state, ctx.obj["config"])))
