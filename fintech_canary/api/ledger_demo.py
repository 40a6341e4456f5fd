import logging
from decimal import Decimal

from fintech_canary.application.transaction_service import (
    InMemoryTransactionRepository,
    TransactionService,
)
from fintech_canary.domain.ledger import TransactionType
from fintech_canary.utils.exceptions import TransactionError

DEMO_ACCOUNT = "acc-123"


class LedgerCanary:
    """Walk through the ledger service against an in-memory repository."""

    def __init__(self, service: TransactionService | None = None) -> None:
        self.service = service or TransactionService(InMemoryTransactionRepository())

    def run(self) -> None:
        logging.info("Starting Fintech Service - Ledger Demo")
        self.demo_successful_transactions()
        self.demo_business_validation()
        self.demo_balance_calculation()
        self.demo_transaction_history()
        self.demo_summary()
        logging.info("Ledger demo complete")

    def demo_successful_transactions(self) -> None:
        logging.info("Demo 1: Processing valid transactions")
        self.process(DEMO_ACCOUNT, "1000.00", "Initial deposit", TransactionType.CREDIT)
        self.process(DEMO_ACCOUNT, "250.00", "Grocery shopping", TransactionType.DEBIT)
        self.process(DEMO_ACCOUNT, "50.00", "ATM withdrawal", TransactionType.DEBIT)

    def demo_business_validation(self) -> None:
        logging.info("Demo 2: Business validation")
        self.process("", "100.00", "Invalid account", TransactionType.CREDIT)
        self.process(DEMO_ACCOUNT, "-50.00", "Negative amount", TransactionType.DEBIT)
        self.process(DEMO_ACCOUNT, "15000.00", "Exceeds limit", TransactionType.CREDIT)

    def demo_balance_calculation(self) -> None:
        logging.info("Demo 3: Balance calculation")
        try:
            balance = self.service.calculate_balance(DEMO_ACCOUNT)
        except TransactionError as e:
            logging.error(f"Balance calculation failed: {e}")
            return
        logging.info(f"Account balance calculated: ${balance}")

    def demo_transaction_history(self) -> None:
        logging.info("Demo 4: Transaction history")
        try:
            transactions = self.service.get_transaction_history(DEMO_ACCOUNT)
        except TransactionError as e:
            logging.error(f"Failed to retrieve transaction history: {e}")
            return
        logging.info(f"Retrieved {len(transactions)} transactions:")
        for t in transactions:
            logging.debug(f"Transaction: {t.type} ${t.amount} - {t.description}")

    def demo_summary(self) -> None:
        logging.info("Demo 5: Account summary")
        summary = self.service.create_transaction_summary()
        try:
            logging.info(f"Account summary: {summary(DEMO_ACCOUNT)}")
        except TransactionError as e:
            logging.error(f"Transaction summary failed: {e}")

    def process(
        self,
        account_id: str,
        amount: str,
        description: str,
        type: TransactionType,
    ) -> bool:
        try:
            t = self.service.process_transaction(
                account_id, Decimal(amount), description, type
            )
        except TransactionError as e:
            logging.warning(f"Transaction validation failed: {e}")
            return False
        logging.info(
            f"Transaction processed: {t.type} ${t.amount} - {t.description} "
            f"[ID: {t.id[:8]}...]"
        )
        return True
