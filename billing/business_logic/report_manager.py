# billing/business_logic/report_manager.py

from typing import Optional, List, Dict, Any, TYPE_CHECKING
from datetime import date
from decimal import Decimal

from billing.business_logic.entities.ledger_entry import LedgerEntry, LedgerTotals
from billing.business_logic import party_ledger, invoice_status
from billing.constants import PartyType, DATE_FORMAT

if TYPE_CHECKING:
    from ..data_access.invoices_repository import InvoicesRepository
    from ..data_access.transactions_repository import TransactionsRepository
    from .party_manager import PartyManager
    from .transaction_manager import TransactionManager

import logging
logger = logging.getLogger(__name__)


class ReportManager:
    def __init__(self,
                 invoices_repository: 'InvoicesRepository',
                 transactions_repository: 'TransactionsRepository',
                 party_manager: 'PartyManager',
                 transaction_manager: 'TransactionManager'):
        self.invoices_repo = invoices_repository
        self.transactions_repo = transactions_repository
        self.party_manager = party_manager
        self.transaction_manager = transaction_manager

    def party_ledger(self, party_id: int) -> List[LedgerEntry]:
        """Chronological statement of the party's invoices and payments/receipts."""
        party = self.party_manager.require_party(party_id)
        return party_ledger.ledger_for(party.id,
                                       self.invoices_repo.get_by_party_id(party.id),
                                       self.transactions_repo.get_by_party_id(party.id))

    def ledger_totals(self, party_id: int) -> LedgerTotals:
        party = self.party_manager.require_party(party_id)
        entries = self.party_ledger(party.id)
        return party_ledger.totals(entries, party.party_type, self.transaction_manager.credit_balance(party.id))

    def business_summary(self, start_date: Optional[date] = None, end_date: Optional[date] = None) -> Dict[str, Any]:
        """
        Sales (customer invoices), purchases (supplier invoices) and what is
        still outstanding on both, optionally limited to an inclusive date range.
        """
        logger.info(f"Generating business summary from {start_date.strftime(DATE_FORMAT) if start_date else '-'} "
                    f"to {end_date.strftime(DATE_FORMAT) if end_date else '-'}")
        party_types = {p.id: p.party_type for p in self.party_manager.get_all_parties()}

        criteria: Dict[str, Any] = {}
        if start_date and end_date:
            criteria["invoice_date"] = ("BETWEEN", (start_date, end_date))
        elif start_date:
            criteria["invoice_date"] = (">=", start_date)
        elif end_date:
            criteria["invoice_date"] = ("<=", end_date)
        invoices = self.invoices_repo.find_by_criteria(criteria, order_by="invoice_date ASC, id ASC")

        report: Dict[str, Any] = {
            "start_date": start_date,
            "end_date": end_date,
            "total_sales": Decimal("0.00"), "sales_count": 0,
            "total_purchases": Decimal("0.00"), "purchase_count": 0,
            "total_receivable": Decimal("0.00"),
            "total_payable": Decimal("0.00"),
            "total_unpaid": Decimal("0.00"),
        }
        for invoice in invoices:
            party_type = party_types.get(invoice.party_id)
            if party_type is None:
                logger.warning(f"Invoice {invoice.invoice_number} references missing party ID {invoice.party_id}; excluded.")
                continue
            outstanding = invoice_status.remaining_balance(invoice)
            if party_type == PartyType.CUSTOMER:
                report["total_sales"] += invoice.total
                report["sales_count"] += 1
                report["total_receivable"] += outstanding
            else:
                report["total_purchases"] += invoice.total
                report["purchase_count"] += 1
                report["total_payable"] += outstanding
            report["total_unpaid"] += outstanding
        return report
