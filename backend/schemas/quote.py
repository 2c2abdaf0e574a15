"""Schemas for the upstream NEPSE live quote feed."""

import logging
from typing import Any, Protocol

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

logger = logging.getLogger(__name__)


class Quote(BaseModel):
    """One symbol's row from the live market snapshot.

    Field names follow the upstream payload. Only ``symbol`` is required;
    unknown fields are kept so the proxy can hand them through.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    symbol: str
    security_name: str | None = Field(default=None, alias="securityName")
    last_traded_price: float | None = Field(default=None, alias="lastTradedPrice")
    closing_price: float | None = Field(default=None, alias="closingPrice")
    ltp: float | None = None
    previous_close: float | None = Field(default=None, alias="previousClose")
    change: float | None = None
    percentage_change: float | None = Field(default=None, alias="percentageChange")
    change_percent: float | None = Field(default=None, alias="changePercent")
    turnover: float | None = None
    total_trade_quantity: float | None = Field(default=None, alias="totalTradeQuantity")
    sector_name: str | None = Field(default=None, alias="sectorName")

    @property
    def live_price(self) -> float | None:
        """First usable price in the lastTradedPrice -> closingPrice -> ltp chain."""
        for price in (self.last_traded_price, self.closing_price, self.ltp):
            if price:
                return price
        return None


class QuoteSnapshot(BaseModel):
    """All quotes from one upstream fetch, indexed by symbol."""

    quotes: dict[str, Quote] = {}

    @classmethod
    def from_payload(cls, payload: Any) -> "QuoteSnapshot":
        """Build a snapshot from the raw upstream JSON.

        The feed has been seen returning a bare list as well as an object
        wrapping the list under ``liveCompanyData``, ``data`` or ``stocks``.
        Rows without a symbol, or with unparseable numbers,
        are skipped.
        """
        rows: list[Any] = []
        if isinstance(payload, list):
            rows = payload
        elif isinstance(payload, dict):
            for key in ("liveCompanyData", "data", "stocks"):
                if isinstance(payload.get(key), list):
                    rows = payload[key]
                    break

        quotes: dict[str, Quote] = {}
        for row in rows:
            if not isinstance(row, dict) or not row.get("symbol"):
                continue
            try:
                quote = Quote.model_validate(row)
            except PydanticValidationError:
                logger.debug("Skipping malformed quote row for %s", row.get("symbol"))
                continue
            quotes[quote.symbol.upper()] = quote
        return cls(quotes=quotes)

    def get(self, symbol: str) -> Quote | None:
        return self.quotes.get(symbol.upper())

    def __len__(self) -> int:
        return len(self.quotes)


class PricedHolding(Protocol):
    stock_symbol: str
    average_price: float


def resolve_live_price(holding: PricedHolding, snapshot: QuoteSnapshot) -> float:
    """Price used to mark ``holding`` to market.

    Falls back to the holding's own ``average_price`` when the symbol is
    missing from the snapshot or carries no usable price, which values that
    line at zero unrealized profit.
    """
    quote = snapshot.get(holding.stock_symbol)
    if quote is not None:
        price = quote.live_price
        if price is not None:
            return price
    return holding.average_price
