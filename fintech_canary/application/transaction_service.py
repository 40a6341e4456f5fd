"""Ledger application service.

Validation failures raise TransactionValidationError, repository failures
are wrapped in TransactionError. Both carry a message suitable for the
end user.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Protocol

from fintech_canary.domain.ledger import Transaction, TransactionType, sum_amounts
from fintech_canary.utils.exceptions import (
    TransactionError,
    TransactionValidationError,
)

MAX_TRANSACTION_AMOUNT = Decimal("10000.00")
DAILY_LIMIT = Decimal("50000.00")


class TransactionRepository(Protocol):
    """This protocol defines mandatory methods
    which must be implemented by a class to be compatible."""

    def save(self, transaction: Transaction) -> Transaction: ...

    def find_by_account_id(self, account_id: str) -> list[Transaction]: ...


class InMemoryTransactionRepository:
    def __init__(self) -> None:
        self.transactions: list[Transaction] = []

    def save(self, transaction: Transaction) -> Transaction:
        self.transactions.append(transaction)
        logging.debug(
            f"Transaction saved: {transaction.id} [Total: {len(self.transactions)}]"
        )
        return transaction

    def find_by_account_id(self, account_id: str) -> list[Transaction]:
        found = [t for t in self.transactions if t.account_id == account_id]
        logging.debug(f"Found {len(found)} transactions for account: {account_id}")
        return found


@dataclass(frozen=True)
class _TransactionRequest:
    account_id: str
    amount: Decimal
    description: str
    type: TransactionType


def _utc_today() -> date:
    return datetime.now(UTC).date()


class TransactionService:
    def __init__(
        self,
        repository: TransactionRepository,
        today: Callable[[], date] = _utc_today,
    ) -> None:
        self.repository = repository
        self._today = today

    def process_transaction(
        self,
        account_id: str,
        amount: Decimal | None,
        description: str,
        type: TransactionType | None,
    ) -> Transaction:
        request = self._validate(account_id, amount, description, type)
        self._check_daily_limit(request)
        return self._create_and_save(request)

    @staticmethod
    def _validate(
        account_id: str,
        amount: Decimal | None,
        description: str,
        type: TransactionType | None,
    ) -> _TransactionRequest:
        if not account_id or not account_id.strip():
            raise TransactionValidationError("Account ID cannot be blank")
        if amount is None or amount <= 0:
            raise TransactionValidationError("Amount must be positive")
        if amount > MAX_TRANSACTION_AMOUNT:
            raise TransactionValidationError(
                f"Amount exceeds maximum limit of {MAX_TRANSACTION_AMOUNT}"
            )
        if not description or not description.strip():
            raise TransactionValidationError("Description cannot be blank")
        if type is None:
            raise TransactionValidationError("Transaction type cannot be null")
        return _TransactionRequest(account_id, amount, description, type)

    def _find(self, account_id: str, error: str) -> list[Transaction]:
        try:
            return self.repository.find_by_account_id(account_id)
        except Exception as e:
            raise TransactionError(error) from e

    def _check_daily_limit(self, request: _TransactionRequest) -> None:
        transactions = self._find(request.account_id, "Failed to check daily limits")
        today = self._today()
        daily_total = sum_amounts(
            t
            for t in transactions
            if t.type == request.type and t.timestamp.astimezone(UTC).date() == today
        )
        if daily_total + request.amount > DAILY_LIMIT:
            raise TransactionValidationError(
                f"Daily limit exceeded. Current: {daily_total}, "
                f"Attempted: {request.amount}, Limit: {DAILY_LIMIT}"
            )

    def _create_and_save(self, request: _TransactionRequest) -> Transaction:
        try:
            return self.repository.save(
                Transaction.create(
                    request.account_id,
                    request.amount,
                    request.description,
                    request.type,
                )
            )
        except Exception as e:
            raise TransactionError(f"Transaction processing failed: {e}") from e

    def get_transaction_history(self, account_id: str) -> list[Transaction]:
        """Transactions of an account, newest first."""
        if not account_id or not account_id.strip():
            raise TransactionValidationError("Account ID cannot be blank")
        transactions = self._find(account_id, "Failed to retrieve transaction history")
        return sorted(transactions, key=lambda t: t.timestamp, reverse=True)

    def calculate_balance(self, account_id: str) -> Decimal:
        transactions = self.get_transaction_history(account_id)
        credits = sum_amounts(t for t in transactions if t.is_credit())
        debits = sum_amounts(t for t in transactions if t.is_debit())
        return credits - debits

    def create_transaction_summary(self) -> Callable[[str], str]:
        def summary(account_id: str) -> str:
            balance = self.calculate_balance(account_id)
            count = len(self.get_transaction_history(account_id))
            return f"Account {account_id}: Balance={balance:.2f}, Transactions={count}"

        return summary
