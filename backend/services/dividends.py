"""Service layer for dividend records."""

import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError
from models.dividend import Dividend
from models.portfolio import Portfolio
from services.portfolios import get_owned_portfolio


class DividendService:
    """Service for dividend rows, ownership-checked through the portfolio."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_dividends(self, user_id: int, portfolio_id: int) -> list[Dividend]:
        """List a portfolio's dividends, most recent date first."""
        await get_owned_portfolio(self.db, user_id, portfolio_id)
        result = await self.db.execute(
            select(Dividend)
            .where(Dividend.portfolio_id == portfolio_id)
            .order_by(Dividend.date.desc(), Dividend.id.desc())
        )
        return list(result.scalars().all())

    async def add_dividend(
        self,
        user_id: int,
        portfolio_id: int,
        stock_symbol: str,
        type: str,
        value: float,
        date: datetime.date,
        notes: str | None = None,
    ) -> Dividend:
        await get_owned_portfolio(self.db, user_id, portfolio_id)

        dividend = Dividend(
            portfolio_id=portfolio_id,
            stock_symbol=stock_symbol,
            type=type,
            value=value,
            date=date,
            notes=notes,
        )
        self.db.add(dividend)
        await self.db.commit()
        await self.db.refresh(dividend)
        return dividend

    async def delete_dividend(self, user_id: int, dividend_id: int) -> None:
        result = await self.db.execute(
            select(Dividend)
            .join(Portfolio, Dividend.portfolio_id == Portfolio.id)
            .where(
                Dividend.id == dividend_id,
                Portfolio.user_id == user_id,
                Portfolio.is_live(),
            )
        )
        dividend = result.scalar_one_or_none()
        if dividend is None:
            raise NotFoundError("Dividend", dividend_id)

        await self.db.delete(dividend)
        await self.db.commit()
