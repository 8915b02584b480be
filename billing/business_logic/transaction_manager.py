# billing/business_logic/transaction_manager.py
from dataclasses import dataclass
from typing import Optional, List, Any, TYPE_CHECKING
from decimal import Decimal
from datetime import date

from billing.business_logic.entities.transaction_entity import TransactionEntity
from billing.business_logic.entities.allocation_entity import AllocationEntity
from billing.business_logic import payment_allocator, party_ledger
from billing.business_logic.invoice_status import to_amount
from billing.business_logic.payment_allocator import AllocationResult
from billing.constants import TransactionType, PaymentMode, PartyType, ZERO
from billing.exceptions import InvalidAmountError, NotFoundError

if TYPE_CHECKING:
    from ..data_access.transactions_repository import TransactionsRepository
    from ..data_access.allocations_repository import AllocationsRepository
    from ..data_access.invoices_repository import InvoicesRepository
    from .party_manager import PartyManager

import logging
logger = logging.getLogger(__name__)


@dataclass
class TransactionResult:
    transaction: TransactionEntity
    allocation: AllocationResult

    @property
    def unallocated(self) -> Decimal:
        return self.allocation.unallocated


class TransactionManager:
    def __init__(self,
                 transactions_repository: 'TransactionsRepository',
                 allocations_repository: 'AllocationsRepository',
                 invoices_repository: 'InvoicesRepository',
                 party_manager: 'PartyManager'):
        self.transactions_repo = transactions_repository
        self.allocations_repo = allocations_repository
        self.invoices_repo = invoices_repository
        self.party_manager = party_manager

    def record_transaction(self,
                           transaction_type: TransactionType,
                           party_id: int,
                           amount: Any,
                           transaction_date: Optional[date] = None,
                           mode: PaymentMode = PaymentMode.CASH,
                           reference: Optional[str] = None,
                           description: Optional[str] = None) -> TransactionResult:
        """
        Records the money movement, then settles the party's oldest unpaid
        invoices with it. The transaction is written before allocation runs
        and stays recorded however much of it is allocated.
        """
        amount_dec = to_amount(amount)
        if amount_dec <= ZERO:
            raise InvalidAmountError(f"Transaction amount must be positive, got {amount_dec}.")
        party = self.party_manager.require_party(party_id)

        expected_type = TransactionType.RECEIPT if party.party_type == PartyType.CUSTOMER else TransactionType.PAYMENT
        if transaction_type != expected_type:
            logger.warning(f"Recording a {transaction_type.value} for {party.party_type.value} '{party.name}'; "
                           f"a {expected_type.value} is usual.")

        transaction = TransactionEntity(
            transaction_type=transaction_type,
            party_id=party.id,
            amount=amount_dec,
            transaction_date=transaction_date or date.today(),
            mode=mode,
            reference=reference,
            description=description,
        )
        self.transactions_repo.add(transaction)
        logger.info(f"{transaction_type.value.capitalize()} of {amount_dec} (ID: {transaction.id}) recorded for '{party.name}'.")

        result = payment_allocator.allocate(party.id, amount_dec, self.invoices_repo.get_by_party_id(party.id))
        for invoice in result.updated_invoices:
            self.invoices_repo.update(invoice)
        for allocation in result.allocations:
            self.allocations_repo.add(AllocationEntity(
                transaction_id=transaction.id,
                invoice_id=allocation.invoice_id,
                amount=allocation.amount,
                allocation_date=transaction.transaction_date,
            ))
            logger.info(f"Invoice {allocation.invoice_number} settled by transaction ID {transaction.id} ({allocation.amount}).")

        if result.unallocated > ZERO:
            logger.warning(f"{result.unallocated} of transaction ID {transaction.id} left unallocated; held as credit for '{party.name}'.")
        return TransactionResult(transaction=transaction, allocation=result)

    def record_receipt(self, party_id: int, amount: Any, **kwargs) -> TransactionResult:
        return self.record_transaction(TransactionType.RECEIPT, party_id, amount, **kwargs)

    def record_payment(self, party_id: int, amount: Any, **kwargs) -> TransactionResult:
        return self.record_transaction(TransactionType.PAYMENT, party_id, amount, **kwargs)

    # --- Reads ---

    def get_transaction_by_id(self, transaction_id: int) -> TransactionEntity:
        transaction = self.transactions_repo.get_by_id(transaction_id)
        if transaction is None:
            raise NotFoundError("Transaction", transaction_id)
        return transaction

    def get_all_transactions(self) -> List[TransactionEntity]:
        return self.transactions_repo.get_all(order_by="transaction_date DESC, id DESC")

    def get_transactions_by_type(self, transaction_type: TransactionType) -> List[TransactionEntity]:
        return self.transactions_repo.get_by_type(transaction_type)

    def get_transactions_for_party(self, party_id: int,
                                   transaction_type: Optional[TransactionType] = None) -> List[TransactionEntity]:
        return self.transactions_repo.get_by_party_id(party_id, transaction_type)

    def get_allocations_for_transaction(self, transaction_id: int) -> List[AllocationEntity]:
        return self.allocations_repo.get_by_transaction_id(transaction_id)

    def get_allocations_for_invoice(self, invoice_id: int) -> List[AllocationEntity]:
        return self.allocations_repo.get_by_invoice_id(invoice_id)

    def credit_balance(self, party_id: int) -> Decimal:
        """Amount the party has paid or received that no invoice absorbed."""
        return party_ledger.credit_balance(self.transactions_repo.get_by_party_id(party_id),
                                           self.allocations_repo.get_by_party_id(party_id))
