# billing/business_logic/invoice_manager.py
from dataclasses import dataclass, field, replace
from typing import Optional, List, Any, Dict, Union, TYPE_CHECKING
from decimal import Decimal
from datetime import date

from billing.business_logic.entities.invoice_entity import InvoiceEntity
from billing.business_logic.entities.invoice_item_entity import InvoiceItemEntity
from billing.business_logic import stock_ledger, invoice_status, payment_allocator, line_items
from billing.business_logic.stock_ledger import StockShortage
from billing.config import DEFAULT_GST_PERCENTAGE, INVOICE_NUMBER_PREFIX
from billing.constants import InvoiceStatus, PartyType, FiscalCalendar, ZERO
from billing.exceptions import NotFoundError, InvalidQuantityError, InvalidAmountError
from billing.utils.numbering import next_document_number

if TYPE_CHECKING:
    from ..data_access.invoices_repository import InvoicesRepository
    from ..data_access.allocations_repository import AllocationsRepository
    from .party_manager import PartyManager
    from .product_manager import ProductManager

import logging
logger = logging.getLogger(__name__)

ItemInput = Union[InvoiceItemEntity, Dict[str, Any]]


@dataclass
class InvoiceSaveResult:
    invoice: InvoiceEntity
    shortages: List[StockShortage] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.shortages)


class InvoiceManager:
    def __init__(self,
                 invoices_repository: 'InvoicesRepository',
                 allocations_repository: 'AllocationsRepository',
                 party_manager: 'PartyManager',
                 product_manager: 'ProductManager',
                 fiscal_calendar: FiscalCalendar = FiscalCalendar.GREGORIAN):
        self.invoices_repo = invoices_repository
        self.allocations_repo = allocations_repository
        self.party_manager = party_manager
        self.product_manager = product_manager
        self.fiscal_calendar = fiscal_calendar

    # --- Helpers ---

    def generate_invoice_number(self, on_date: Optional[date] = None) -> str:
        return next_document_number(INVOICE_NUMBER_PREFIX,
                                    self.invoices_repo.get_all_invoice_numbers(),
                                    on_date or date.today(),
                                    self.fiscal_calendar)

    def _build_items(self, items_data: List[ItemInput]) -> List[InvoiceItemEntity]:
        if not items_data:
            raise InvalidQuantityError("An invoice must have at least one item.")
        return line_items.build_lines(items_data, InvoiceItemEntity, self.product_manager.require_product)

    def _sync_allocations(self, invoice: InvoiceEntity) -> None:
        """Trims the invoice's allocation rows to its paid amount; the excess returns to credit."""
        changed, removed = payment_allocator.trim_allocations(
            self.allocations_repo.get_by_invoice_id(invoice.id), invoice.paid_amount)
        for row in changed:
            self.allocations_repo.update(row)
        for row in removed:
            self.allocations_repo.delete(row.id)
        if changed or removed:
            logger.info(f"Allocations on {invoice.invoice_number} trimmed to paid amount {invoice.paid_amount}: "
                        f"{len(changed)} reduced, {len(removed)} removed.")

    @staticmethod
    def _non_negative(value: Any, label: str) -> Decimal:
        amount = invoice_status.to_amount(value)
        if amount < ZERO:
            raise InvalidAmountError(f"{label} cannot be negative, got {amount}.")
        return amount

    def _log_shortages(self, invoice: InvoiceEntity, shortages: List[StockShortage]) -> None:
        for s in shortages:
            logger.warning(f"Insufficient stock on {invoice.invoice_number}: '{s.product_name}' "
                           f"requested {s.requested}, available {s.available}.")

    # --- Create / update / delete ---

    def create_invoice(self,
                       party_id: int,
                       items: List[ItemInput],
                       invoice_date: Optional[date] = None,
                       gst_percentage: Any = DEFAULT_GST_PERCENTAGE,
                       discount: Any = Decimal("0.00"),
                       paid_amount: Any = Decimal("0.00"),
                       notes: Optional[str] = None,
                       invoice_number: Optional[str] = None) -> InvoiceSaveResult:
        """
        Saves the invoice and applies its stock effect. Selling more than is
        on hand is allowed; the shortages come back on the result.
        """
        party = self.party_manager.require_party(party_id)
        invoice_date = invoice_date or date.today()

        invoice = InvoiceEntity(
            invoice_number=invoice_number or self.generate_invoice_number(invoice_date),
            party_id=party.id,
            invoice_date=invoice_date,
            gst_percentage=self._non_negative(gst_percentage, "GST percentage"),
            discount=self._non_negative(discount, "Discount"),
            paid_amount=self._non_negative(paid_amount, "Paid amount"),
            notes=notes,
            items=self._build_items(items),
        )
        invoice = invoice_status.rebalance(invoice)

        products = self.product_manager.products_for(stock_ledger.invoice_stock_changes(invoice, party.party_type))
        shortages = stock_ledger.find_shortages(products, invoice, party.party_type)
        updated_products = stock_ledger.apply_invoice(products, invoice, party.party_type)  # raises before any write

        self.invoices_repo.add(invoice)
        self.product_manager.save_stock(updated_products)
        logger.info(f"Invoice {invoice.invoice_number} (ID: {invoice.id}) created for '{party.name}': "
                    f"total {invoice.total}, status {invoice.status.value}.")
        self._log_shortages(invoice, shortages)
        return InvoiceSaveResult(invoice=invoice, shortages=shortages)

    def create_quick_invoice(self,
                             party_id: int,
                             product_id: int,
                             quantity: int = 1,
                             invoice_date: Optional[date] = None) -> InvoiceSaveResult:
        """Single-line invoice at the product's sale price with the default GST."""
        product = self.product_manager.require_product(product_id)
        line = {"product_id": product.id, "product_name": product.name, "quantity": quantity, "rate": product.price}
        return self.create_invoice(party_id, [line], invoice_date=invoice_date, gst_percentage=DEFAULT_GST_PERCENTAGE)

    def update_invoice(self, invoice_id: int, update_data: Dict[str, Any]) -> InvoiceSaveResult:
        """
        Edits items, date, GST, discount or notes. The old stock effect is
        reversed and the new one applied; paid_amount is clamped to the new
        total and the status re-derived.
        """
        old = self.require_invoice(invoice_id)
        party = self.party_manager.require_party(old.party_id)

        changes: Dict[str, Any] = {}
        if "items" in update_data:
            changes["items"] = self._build_items(update_data["items"])
        if "invoice_date" in update_data:
            changes["invoice_date"] = update_data["invoice_date"]
        if "gst_percentage" in update_data:
            changes["gst_percentage"] = self._non_negative(update_data["gst_percentage"], "GST percentage")
        if "discount" in update_data:
            changes["discount"] = self._non_negative(update_data["discount"], "Discount")
        if "notes" in update_data:
            changes["notes"] = update_data["notes"]
        unknown = set(update_data) - set(changes)
        if unknown:
            logger.warning(f"Ignored fields in update of invoice ID {invoice_id}: {sorted(unknown)}")

        new = invoice_status.rebalance(replace(old, **changes))

        product_ids = set(stock_ledger.invoice_stock_changes(old, party.party_type)) | \
            set(stock_ledger.invoice_stock_changes(new, party.party_type))
        products = self.product_manager.products_for(product_ids)
        after_reverse = dict(products)
        after_reverse.update(stock_ledger.index_by_id(stock_ledger.reverse_invoice(products, old, party.party_type)))
        shortages = stock_ledger.find_shortages(after_reverse, new, party.party_type)
        final = dict(after_reverse)
        final.update(stock_ledger.index_by_id(stock_ledger.apply_invoice(after_reverse, new, party.party_type)))
        changed_products = [p for pid, p in final.items() if p.stock != products[pid].stock]

        self.invoices_repo.update(new)
        self._sync_allocations(new)
        self.product_manager.save_stock(changed_products)
        logger.info(f"Invoice {new.invoice_number} (ID: {invoice_id}) updated: total {new.total}, status {new.status.value}.")
        self._log_shortages(new, shortages)
        return InvoiceSaveResult(invoice=new, shortages=shortages)

    def delete_invoice(self, invoice_id: int) -> None:
        """Reverses the stock effect, then removes the invoice with its items and allocations."""
        invoice = self.require_invoice(invoice_id)
        party = self.party_manager.get_party_by_id(invoice.party_id)
        if party is not None:
            changes = stock_ledger.invoice_stock_changes(invoice, party.party_type)
            self.product_manager.apply_stock_changes({pid: -c for pid, c in changes.items()}, strict=False)
        else:
            logger.warning(f"Invoice {invoice.invoice_number} has no party; stock effect not reversed.")
        self.invoices_repo.delete(invoice_id)
        logger.info(f"Invoice {invoice.invoice_number} (ID: {invoice_id}) deleted.")

    # --- Status ---

    def set_invoice_status(self, invoice_id: int, status: InvoiceStatus) -> InvoiceEntity:
        invoice = self.require_invoice(invoice_id)
        updated = invoice_status.set_status(invoice, status)
        self.invoices_repo.update(updated)
        self._sync_allocations(updated)
        logger.info(f"Invoice {updated.invoice_number} marked {updated.status.value} (paid amount {updated.paid_amount}).")
        return updated

    def mark_paid(self, invoice_id: int) -> InvoiceEntity:
        return self.set_invoice_status(invoice_id, InvoiceStatus.PAID)

    def mark_unpaid(self, invoice_id: int) -> InvoiceEntity:
        return self.set_invoice_status(invoice_id, InvoiceStatus.UNPAID)

    def remaining_balance(self, invoice_id: int) -> Decimal:
        return invoice_status.remaining_balance(self.require_invoice(invoice_id))

    # --- Reads ---

    def get_invoice_by_id(self, invoice_id: int) -> Optional[InvoiceEntity]:
        invoice = self.invoices_repo.get_by_id(invoice_id)
        if not invoice:
            logger.warning(f"Invoice with ID {invoice_id} not found.")
        return invoice

    def require_invoice(self, invoice_id: int) -> InvoiceEntity:
        invoice = self.invoices_repo.get_by_id(invoice_id)
        if invoice is None:
            raise NotFoundError("Invoice", invoice_id)
        return invoice

    def get_invoice_by_number(self, invoice_number: str) -> Optional[InvoiceEntity]:
        return self.invoices_repo.get_by_invoice_number(invoice_number)

    def get_all_invoices(self) -> List[InvoiceEntity]:
        return self.invoices_repo.get_all(order_by="invoice_date DESC, id DESC")

    def get_invoices_for_party(self, party_id: int) -> List[InvoiceEntity]:
        return self.invoices_repo.get_by_party_id(party_id)

    def get_invoices_by_status(self, status: InvoiceStatus) -> List[InvoiceEntity]:
        return self.invoices_repo.find_by_criteria({"status": status}, order_by="invoice_date DESC, id DESC")

    def _invoices_for_party_type(self, party_type: PartyType) -> List[InvoiceEntity]:
        party_ids = {p.id for p in self.party_manager.get_all_parties(party_type)}
        return [inv for inv in self.get_all_invoices() if inv.party_id in party_ids]

    def get_sales_invoices(self) -> List[InvoiceEntity]:
        return self._invoices_for_party_type(PartyType.CUSTOMER)

    def get_purchase_invoices(self) -> List[InvoiceEntity]:
        return self._invoices_for_party_type(PartyType.SUPPLIER)

