"""Service layer for the paper-trading account and journal.

Transactions are a journal only: recording or deleting one never changes the
account's ``current_balance``. The balance moves only through
``update_balance``.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from errors import NotFoundError
from models.demotrading import DemoTradingAccount, DemoTradingTransaction, TradeSide

logger = logging.getLogger(__name__)

DEFAULT_STARTING_BALANCE = 10_000_000.0


class DemoTradingService:
    """Service for demo trading accounts (one per user) and their transactions."""

    def __init__(self, db: AsyncSession, starting_balance: float = DEFAULT_STARTING_BALANCE):
        self.db = db
        self.starting_balance = starting_balance

    async def _find_account(self, user_id: int) -> DemoTradingAccount | None:
        result = await self.db.execute(
            select(DemoTradingAccount).where(DemoTradingAccount.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_account(self, user_id: int) -> DemoTradingAccount:
        account = await self._find_account(user_id)
        if account is None:
            raise NotFoundError("Demo trading account")
        return account

    async def get_or_create_account(self, user_id: int) -> tuple[DemoTradingAccount, bool]:
        """Return the user's account, opening it with the starting balance if needed.

        Returns:
            Tuple of (account, created).
        """
        account = await self._find_account(user_id)
        if account is not None:
            return account, False

        account = DemoTradingAccount(user_id=user_id, current_balance=self.starting_balance)
        self.db.add(account)
        try:
            await self.db.commit()
        except IntegrityError:
            # Another request opened the account first
            await self.db.rollback()
            return await self.get_account(user_id), False
        await self.db.refresh(account)
        logger.info("Opened demo trading account %s for user %s", account.id, user_id)
        return account, True

    async def update_balance(self, user_id: int, current_balance: float) -> DemoTradingAccount:
        account = await self.get_account(user_id)
        account.current_balance = current_balance
        await self.db.commit()
        await self.db.refresh(account)
        return account

    async def record_transaction(
        self,
        user_id: int,
        stock_symbol: str,
        side: str,
        quantity: int,
        price: float,
        account_id: int | None = None,
    ) -> DemoTradingTransaction:
        """Journal a demo trade against the user's account.

        Args:
            account_id: Account the caller claims to trade on. When given it
                must be the user's own account; when omitted the user's
                account is used.

        Raises:
            NotFoundError: If the user has no account or ``account_id`` is not
                theirs.
        """
        account = await self._find_account(user_id)
        if account is None or (account_id is not None and account.id != account_id):
            raise NotFoundError("Demo trading account")

        transaction = DemoTradingTransaction(
            demotrading_id=account.id,
            stock_symbol=stock_symbol,
            side=TradeSide(side).value,
            quantity=quantity,
            price=price,
        )
        self.db.add(transaction)
        await self.db.commit()
        await self.db.refresh(transaction)
        return transaction

    async def list_transactions(self, user_id: int) -> list[DemoTradingTransaction]:
        """List the user's transactions, newest first. Empty without an account."""
        result = await self.db.execute(
            select(DemoTradingTransaction)
            .join(DemoTradingAccount, DemoTradingTransaction.demotrading_id == DemoTradingAccount.id)
            .where(DemoTradingAccount.user_id == user_id)
            .order_by(DemoTradingTransaction.created_at.desc(), DemoTradingTransaction.id.desc())
        )
        return list(result.scalars().all())

    async def delete_transaction(self, user_id: int, transaction_id: int) -> None:
        result = await self.db.execute(
            select(DemoTradingTransaction)
            .join(DemoTradingAccount, DemoTradingTransaction.demotrading_id == DemoTradingAccount.id)
            .where(
                DemoTradingTransaction.id == transaction_id,
                DemoTradingAccount.user_id == user_id,
            )
        )
        transaction = result.scalar_one_or_none()
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)

        await self.db.delete(transaction)
        await self.db.commit()
