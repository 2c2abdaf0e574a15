"""Service layer for portfolio persistence.

Every query is scoped to the owning user and to live (non-deleted) rows.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import Text, func, insert, literal, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import (
    DuplicateResourceError,
    LimitExceededError,
    NotFoundError,
    PortfolioNotEmptyError,
)
from models.portfolio import Portfolio, PortfolioHolding

logger = logging.getLogger(__name__)

DEFAULT_MAX_PORTFOLIOS = 5


@dataclass
class PortfolioAggregate:
    """A portfolio with totals computed from stored prices only."""

    portfolio: Portfolio
    holdings_count: int
    total_value: float


async def get_owned_portfolio(
    db: AsyncSession,
    user_id: int,
    portfolio_id: int,
) -> Portfolio:
    """Load a live portfolio belonging to ``user_id``.

    Raises:
        NotFoundError: If the portfolio is missing, soft-deleted, or owned by
            another user.
    """
    result = await db.execute(
        select(Portfolio).where(
            Portfolio.id == portfolio_id,
            Portfolio.user_id == user_id,
            Portfolio.is_live(),
        )
    )
    portfolio = result.scalar_one_or_none()
    if portfolio is None:
        raise NotFoundError("Portfolio", portfolio_id)
    return portfolio


class PortfolioService:
    """Service for creating, listing, updating and soft-deleting portfolios."""

    def __init__(self, db: AsyncSession, max_portfolios: int = DEFAULT_MAX_PORTFOLIOS):
        self.db = db
        self.max_portfolios = max_portfolios

    async def _name_taken(
        self,
        user_id: int,
        name: str,
        exclude_id: int | None = None,
    ) -> bool:
        query = select(Portfolio.id).where(
            Portfolio.user_id == user_id,
            Portfolio.name == name,
            Portfolio.is_live(),
        )
        if exclude_id is not None:
            query = query.where(Portfolio.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.first() is not None

    async def count_live(self, user_id: int) -> int:
        count = await self.db.scalar(
            select(func.count(Portfolio.id)).where(
                Portfolio.user_id == user_id,
                Portfolio.is_live(),
            )
        )
        return count or 0

    async def count_holdings(self, portfolio_id: int) -> int:
        count = await self.db.scalar(
            select(func.count(PortfolioHolding.id)).where(
                PortfolioHolding.portfolio_id == portfolio_id
            )
        )
        return count or 0

    async def create_portfolio(
        self,
        user_id: int,
        name: str,
        initial_balance: float = 0.0,
        description: str | None = None,
    ) -> Portfolio:
        """Create a portfolio for ``user_id``.

        The row is written by a single ``INSERT ... SELECT`` that only inserts
        while the user is under the limit, so concurrent creates cannot push
        the live count past ``max_portfolios``. Concurrent creates with the
        same name are rejected by the live-name unique index.

        Raises:
            LimitExceededError: If the user already has the maximum number of
                live portfolios.
            DuplicateResourceError: If a live portfolio of this user already
                has ``name`` (exact, case-sensitive match).
        """
        if await self.count_live(user_id) >= self.max_portfolios:
            raise LimitExceededError(self.max_portfolios)
        if await self._name_taken(user_id, name):
            raise DuplicateResourceError("Portfolio name already exists", status_code=400)

        live_count = (
            select(func.count(Portfolio.id))
            .where(Portfolio.user_id == user_id, Portfolio.is_live())
            .correlate(None)
            .scalar_subquery()
        )
        row = select(
            literal(user_id),
            literal(name),
            literal(description or None, Text),
            literal(initial_balance),
            literal(initial_balance),
        ).where(live_count < self.max_portfolios)
        stmt = insert(Portfolio.__table__).from_select(
            ["user_id", "name", "description", "initial_balance", "current_balance"],
            row,
        )

        try:
            result = await self.db.execute(stmt)
            if result.rowcount == 0:
                await self.db.rollback()
                raise LimitExceededError(self.max_portfolios)
            portfolio = (
                await self.db.execute(
                    select(Portfolio).where(
                        Portfolio.user_id == user_id,
                        Portfolio.name == name,
                        Portfolio.is_live(),
                    )
                )
            ).scalar_one()
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateResourceError(
                "Portfolio name already exists", status_code=400
            ) from exc

        await self.db.refresh(portfolio)
        logger.info("User %s created portfolio %s", user_id, portfolio.id)
        return portfolio

    async def list_portfolios(self, user_id: int) -> list[PortfolioAggregate]:
        """List live portfolios, newest first, with holding row count and cost total.

        ``total_value`` is the sum of quantity * average_price over every row,
        Buy or Sell; it uses no live quotes.
        """
        query = (
            select(
                Portfolio,
                func.count(PortfolioHolding.id),
                func.coalesce(
                    func.sum(PortfolioHolding.quantity * PortfolioHolding.average_price),
                    0.0,
                ),
            )
            .outerjoin(PortfolioHolding, PortfolioHolding.portfolio_id == Portfolio.id)
            .where(Portfolio.user_id == user_id, Portfolio.is_live())
            .group_by(Portfolio.id)
            .order_by(Portfolio.created_at.desc(), Portfolio.id.desc())
        )
        result = await self.db.execute(query)
        return [
            PortfolioAggregate(
                portfolio=portfolio,
                holdings_count=int(count or 0),
                total_value=float(total or 0.0),
            )
            for portfolio, count, total in result.all()
        ]

    async def get_portfolio(self, user_id: int, portfolio_id: int) -> Portfolio:
        return await get_owned_portfolio(self.db, user_id, portfolio_id)

    async def update_portfolio(
        self,
        user_id: int,
        portfolio_id: int,
        changes: dict[str, Any],
    ) -> Portfolio:
        """Apply a partial update.

        Args:
            changes: Subset of ``name``, ``description``, ``initial_balance``.

        Raises:
            NotFoundError: If the portfolio is not a live portfolio of the user.
            DuplicateResourceError: If the new name collides with another live
                portfolio of the same user.
        """
        portfolio = await get_owned_portfolio(self.db, user_id, portfolio_id)

        name = changes.get("name")
        if name is not None and name != portfolio.name:
            if await self._name_taken(user_id, name, exclude_id=portfolio.id):
                raise DuplicateResourceError("Portfolio name already exists", status_code=400)
            portfolio.name = name
        if "description" in changes:
            portfolio.description = changes["description"] or None
        if changes.get("initial_balance") is not None:
            portfolio.initial_balance = changes["initial_balance"]

        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateResourceError(
                "Portfolio name already exists", status_code=400
            ) from exc
        await self.db.refresh(portfolio)
        return portfolio

    async def delete_portfolio(self, user_id: int, portfolio_id: int) -> None:
        """Soft-delete an empty portfolio.

        Raises:
            NotFoundError: If the portfolio is not a live portfolio of the user.
            PortfolioNotEmptyError: While any holding rows remain.
        """
        portfolio = await get_owned_portfolio(self.db, user_id, portfolio_id)

        holdings_count = await self.count_holdings(portfolio.id)
        if holdings_count > 0:
            raise PortfolioNotEmptyError(portfolio.id, holdings_count)

        portfolio.deleted_at = datetime.now(timezone.utc)
        await self.db.commit()
        logger.info("User %s deleted portfolio %s", user_id, portfolio.id)
