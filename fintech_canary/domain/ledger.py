import uuid
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from decimal import Decimal
from enum import StrEnum


class TransactionType(StrEnum):
    CREDIT = "CREDIT"
    DEBIT = "DEBIT"


@dataclass(frozen=True)
class Transaction:
    id: str
    account_id: str
    amount: Decimal
    description: str
    timestamp: datetime
    type: TransactionType

    def __post_init__(self) -> None:
        for name in ("id", "account_id", "amount", "description", "timestamp", "type"):
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be None")
        if self.amount <= 0:
            raise ValueError("Amount must be positive")
        if not self.description.strip():
            raise ValueError("Description cannot be blank")

    @classmethod
    def create(
        cls,
        account_id: str,
        amount: Decimal,
        description: str,
        type: TransactionType,
    ) -> "Transaction":
        return cls(
            id=str(uuid.uuid4()),
            account_id=account_id,
            amount=amount,
            description=description,
            timestamp=datetime.now(UTC),
            type=type,
        )

    def is_debit(self) -> bool:
        return self.type == TransactionType.DEBIT

    def is_credit(self) -> bool:
        return self.type == TransactionType.CREDIT


def sum_amounts(transactions: Iterable[Transaction]) -> Decimal:
    return sum((t.amount for t in transactions), Decimal(0))


@dataclass(frozen=True)
class Account:
    id: str
    customer_id: str
    balance: Decimal
    transactions: tuple[Transaction, ...] = field(default=())

    def __post_init__(self) -> None:
        for name in ("id", "customer_id", "balance"):
            if getattr(self, name) is None:
                raise ValueError(f"{name} cannot be None")
        # frozen: normalize through object.__setattr__
        object.__setattr__(self, "transactions", tuple(self.transactions or ()))

    def total_debits(self) -> Decimal:
        return sum_amounts(t for t in self.transactions if t.is_debit())

    def total_credits(self) -> Decimal:
        return sum_amounts(t for t in self.transactions if t.is_credit())
