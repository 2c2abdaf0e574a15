"""Portfolio valuation: cost basis, live value and profit/loss.

Pure functions over already-validated rows; no database or network access.
Holdings are stored one row per Buy/Sell transaction, so everything here
aggregates rows itself.

Headline metrics net sells against *cost*, not against share count: a sell
row reduces ``net_investment`` by its proceeds but the matching buy rows keep
contributing their full quantity to ``current_value`` and ``holdings_count``.
The per-symbol ``positions`` breakdown carries the share-count netting for
callers that need it.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from schemas.quote import QuoteSnapshot, resolve_live_price


class HoldingRow(Protocol):
    stock_symbol: str
    quantity: int
    average_price: float
    transaction_type: str


class DividendRow(Protocol):
    type: str
    value: float


def is_buy(holding: HoldingRow) -> bool:
    return holding.transaction_type.strip().lower() == "buy"


def is_sell(holding: HoldingRow) -> bool:
    return holding.transaction_type.strip().lower() == "sell"


@dataclass
class SymbolPosition:
    """Share-count view of one symbol across all of its rows."""

    symbol: str
    bought_quantity: int = 0
    sold_quantity: int = 0
    buy_cost: float = 0.0
    sell_proceeds: float = 0.0
    live_price: float | None = None

    @property
    def net_quantity(self) -> int:
        return self.bought_quantity - self.sold_quantity

    @property
    def market_value(self) -> float | None:
        if self.live_price is None:
            return None
        return self.net_quantity * self.live_price


@dataclass
class PortfolioValuation:
    """Portfolio-level metrics produced by ``value_portfolio``."""

    total_investment: float = 0.0
    total_disposed: float = 0.0
    net_investment: float = 0.0
    current_value: float = 0.0
    profit_loss: float = 0.0
    profit_loss_percent: float = 0.0
    holdings_count: int = 0
    positions: list[SymbolPosition] = field(default_factory=list)


@dataclass
class DividendSummary:
    """Dividend totals. Cash is currency; bonus and right are share counts."""

    total_cash: float = 0.0
    total_bonus_shares: float = 0.0
    total_right_shares: float = 0.0
    cash_count: int = 0
    bonus_count: int = 0
    right_count: int = 0


def profit_loss_percent(profit_loss: float, net_investment: float) -> float:
    """Return P/L as a percentage of net investment.

    A zero or negative net investment yields exactly 0.0 regardless of the
    sign of ``profit_loss``.
    """
    if net_investment <= 0:
        return 0.0
    return profit_loss * 100 / net_investment


def value_portfolio(
    holdings: Iterable[HoldingRow],
    snapshot: QuoteSnapshot | None = None,
) -> PortfolioValuation:
    """Compute valuation metrics for one portfolio's holding rows.

    Args:
        holdings: Buy and Sell rows of a single portfolio.
        snapshot: Live quotes. ``None`` or an empty snapshot values every buy
            at its own ``average_price`` (no P/L signal).

    Returns:
        PortfolioValuation with headline metrics and per-symbol positions.
    """
    snapshot = snapshot or QuoteSnapshot()
    rows = list(holdings)
    buys = [h for h in rows if is_buy(h)]
    sells = [h for h in rows if is_sell(h)]

    total_investment = sum((h.quantity * h.average_price for h in buys), 0.0)
    total_disposed = sum((h.quantity * h.average_price for h in sells), 0.0)
    net_investment = total_investment - total_disposed

    current_value = 0.0
    positions: dict[str, SymbolPosition] = {}
    for holding in buys:
        live_price = resolve_live_price(holding, snapshot)
        current_value += holding.quantity * live_price

        position = positions.setdefault(
            holding.stock_symbol.upper(), SymbolPosition(symbol=holding.stock_symbol.upper())
        )
        position.bought_quantity += holding.quantity
        position.buy_cost += holding.quantity * holding.average_price

    for holding in sells:
        position = positions.setdefault(
            holding.stock_symbol.upper(), SymbolPosition(symbol=holding.stock_symbol.upper())
        )
        position.sold_quantity += holding.quantity
        position.sell_proceeds += holding.quantity * holding.average_price

    for position in positions.values():
        quote = snapshot.get(position.symbol)
        position.live_price = quote.live_price if quote is not None else None

    profit_loss = current_value - net_investment

    return PortfolioValuation(
        total_investment=total_investment,
        total_disposed=total_disposed,
        net_investment=net_investment,
        current_value=current_value,
        profit_loss=profit_loss,
        profit_loss_percent=profit_loss_percent(profit_loss, net_investment),
        holdings_count=len(buys),
        positions=sorted(positions.values(), key=lambda p: p.symbol),
    )


def summarize_dividends(dividends: Iterable[DividendRow]) -> DividendSummary:
    """Tally dividend rows by case-insensitive type.

    Rows with an unrecognized type are ignored.
    """
    summary = DividendSummary()
    for dividend in dividends:
        kind = (dividend.type or "").strip().lower()
        value = float(dividend.value)
        if kind == "cash":
            summary.total_cash += value
            summary.cash_count += 1
        elif kind == "bonus":
            summary.total_bonus_shares += value
            summary.bonus_count += 1
        elif kind == "right":
            summary.total_right_shares += value
            summary.right_count += 1
    return summary
