"""Service layer for portfolio holding rows."""

import logging
import math

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError, ValidationError
from models.portfolio import Portfolio, PortfolioHolding, TransactionType
from services.portfolios import get_owned_portfolio

logger = logging.getLogger(__name__)


def _require_positive(value: float, field: str) -> None:
    if isinstance(value, bool) or not math.isfinite(value) or value <= 0:
        raise ValidationError(f"{field} must be a finite positive number", field=field)


class HoldingService:
    """Service for Buy/Sell rows. Ownership is checked through the portfolio."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_holdings(self, user_id: int, portfolio_id: int) -> list[PortfolioHolding]:
        """List every row of a live portfolio owned by ``user_id``, oldest first."""
        await get_owned_portfolio(self.db, user_id, portfolio_id)
        result = await self.db.execute(
            select(PortfolioHolding)
            .where(PortfolioHolding.portfolio_id == portfolio_id)
            .order_by(PortfolioHolding.created_at, PortfolioHolding.id)
        )
        return list(result.scalars().all())

    async def add_holding(
        self,
        user_id: int,
        portfolio_id: int,
        stock_symbol: str,
        quantity: int,
        average_price: float,
        transaction_type: str = TransactionType.BUY.value,
        cash_dividend: float = 0.0,
        right_share: int = 0,
        bonus_share: int = 0,
        other_note: str | None = None,
    ) -> PortfolioHolding:
        """Record one Buy or Sell row.

        Raises:
            ValidationError: If quantity or price is not a finite positive
                number, or the transaction type is unknown.
            NotFoundError: If the portfolio is not a live portfolio of the user.
        """
        _require_positive(quantity, "quantity")
        _require_positive(average_price, "average_price")
        if int(quantity) != quantity:
            raise ValidationError("quantity must be a whole number", field="quantity")
        try:
            side = TransactionType(transaction_type)
        except ValueError as exc:
            raise ValidationError(
                "transaction_type must be Buy or Sell", field="transaction_type"
            ) from exc

        await get_owned_portfolio(self.db, user_id, portfolio_id)

        holding = PortfolioHolding(
            portfolio_id=portfolio_id,
            stock_symbol=stock_symbol,
            quantity=int(quantity),
            average_price=average_price,
            transaction_type=side.value,
            cash_dividend=cash_dividend,
            right_share=right_share,
            bonus_share=bonus_share,
            other_note=other_note,
        )
        self.db.add(holding)
        await self.db.commit()
        await self.db.refresh(holding)
        logger.info(
            "Portfolio %s: recorded %s %s x%s @ %s",
            portfolio_id, side.value, stock_symbol, quantity, average_price,
        )
        return holding

    async def delete_holding(self, user_id: int, holding_id: int) -> int:
        """Delete a row and return the id of the portfolio it belonged to.

        Raises:
            NotFoundError: If the row does not exist or its portfolio is not a
                live portfolio of the user.
        """
        result = await self.db.execute(
            select(PortfolioHolding)
            .join(Portfolio, PortfolioHolding.portfolio_id == Portfolio.id)
            .where(
                PortfolioHolding.id == holding_id,
                Portfolio.user_id == user_id,
                Portfolio.is_live(),
            )
        )
        holding = result.scalar_one_or_none()
        if holding is None:
            raise NotFoundError("Holding", holding_id)

        portfolio_id = holding.portfolio_id
        await self.db.delete(holding)
        await self.db.commit()
        return portfolio_id
