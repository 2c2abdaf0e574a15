"""Service layer for watchlist entries."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import DuplicateResourceError, NotFoundError
from models.watchlist import WatchlistEntry


class WatchlistService:
    """Service for a user's followed symbols."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _get_entry(self, user_id: int, stock_symbol: str) -> WatchlistEntry:
        result = await self.db.execute(
            select(WatchlistEntry).where(
                WatchlistEntry.user_id == user_id,
                WatchlistEntry.stock_symbol == stock_symbol,
            )
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise NotFoundError(f"{stock_symbol} in watchlist")
        return entry

    async def list_watchlist(self, user_id: int) -> list[WatchlistEntry]:
        """List entries, most recently added first."""
        result = await self.db.execute(
            select(WatchlistEntry)
            .where(WatchlistEntry.user_id == user_id)
            .order_by(WatchlistEntry.created_at.desc(), WatchlistEntry.id.desc())
        )
        return list(result.scalars().all())

    async def add_to_watchlist(
        self,
        user_id: int,
        stock_symbol: str,
        target_price: float | None = None,
        notes: str | None = None,
    ) -> WatchlistEntry:
        """Follow a symbol.

        Raises:
            DuplicateResourceError: If the user already follows the symbol.
        """
        existing = await self.db.scalar(
            select(WatchlistEntry.id).where(
                WatchlistEntry.user_id == user_id,
                WatchlistEntry.stock_symbol == stock_symbol,
            )
        )
        if existing is not None:
            raise DuplicateResourceError("Stock already in watchlist")

        entry = WatchlistEntry(
            user_id=user_id,
            stock_symbol=stock_symbol,
            target_price=target_price,
            notes=notes,
        )
        self.db.add(entry)
        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise DuplicateResourceError("Stock already in watchlist") from exc
        await self.db.refresh(entry)
        return entry

    async def update_entry(
        self,
        user_id: int,
        stock_symbol: str,
        changes: dict[str, Any],
    ) -> WatchlistEntry:
        """Set target price and/or notes. Keys present with None clear the field."""
        entry = await self._get_entry(user_id, stock_symbol)
        if "target_price" in changes:
            entry.target_price = changes["target_price"]
        if "notes" in changes:
            entry.notes = changes["notes"]
        await self.db.commit()
        await self.db.refresh(entry)
        return entry

    async def remove_from_watchlist(self, user_id: int, stock_symbol: str) -> WatchlistEntry:
        """Unfollow a symbol and return the removed entry.

        Raises:
            NotFoundError: If the user does not follow the symbol.
        """
        entry = await self._get_entry(user_id, stock_symbol)
        await self.db.delete(entry)
        await self.db.commit()
        return entry
