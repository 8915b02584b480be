# billing/business_logic/return_manager.py
from dataclasses import dataclass, field
from typing import Optional, List, Any, Dict, Union, TYPE_CHECKING
from datetime import date

from billing.business_logic.entities.return_entity import ReturnEntity
from billing.business_logic.entities.return_item_entity import ReturnItemEntity
from billing.business_logic import stock_ledger, return_processor, line_items
from billing.business_logic.invoice_status import to_amount
from billing.business_logic.return_processor import ReturnQuantityWarning, StockEffect
from billing.config import SALES_RETURN_PREFIX, PURCHASE_RETURN_PREFIX
from billing.constants import ReturnType, ReturnStatus, PartyType, FiscalCalendar, ZERO
from billing.exceptions import NotFoundError, InvalidAmountError
from billing.utils.numbering import next_document_number

if TYPE_CHECKING:
    from ..data_access.returns_repository import ReturnsRepository
    from .party_manager import PartyManager
    from .product_manager import ProductManager
    from .invoice_manager import InvoiceManager

import logging
logger = logging.getLogger(__name__)

ReturnItemInput = Union[ReturnItemEntity, Dict[str, Any]]


@dataclass
class ReturnSaveResult:
    return_entity: ReturnEntity
    warnings: List[ReturnQuantityWarning] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


class ReturnManager:
    def __init__(self,
                 returns_repository: 'ReturnsRepository',
                 party_manager: 'PartyManager',
                 product_manager: 'ProductManager',
                 invoice_manager: 'InvoiceManager',
                 fiscal_calendar: FiscalCalendar = FiscalCalendar.GREGORIAN):
        self.returns_repo = returns_repository
        self.party_manager = party_manager
        self.product_manager = product_manager
        self.invoice_manager = invoice_manager
        self.fiscal_calendar = fiscal_calendar

    def generate_return_number(self, return_type: ReturnType, on_date: Optional[date] = None) -> str:
        prefix = SALES_RETURN_PREFIX if return_type == ReturnType.SALES else PURCHASE_RETURN_PREFIX
        return next_document_number(prefix,
                                    self.returns_repo.get_all_return_numbers(),
                                    on_date or date.today(),
                                    self.fiscal_calendar)

    def _build_items(self, items_data: List[ReturnItemInput]) -> List[ReturnItemEntity]:
        return line_items.build_lines(items_data, ReturnItemEntity, self.product_manager.require_product)

    def create_return(self,
                      return_type: ReturnType,
                      party_id: int,
                      items: List[ReturnItemInput],
                      return_date: Optional[date] = None,
                      invoice_id: Optional[int] = None,
                      gst_percentage: Any = None,
                      notes: Optional[str] = None,
                      status: ReturnStatus = ReturnStatus.PENDING,
                      return_number: Optional[str] = None) -> ReturnSaveResult:
        """
        Saves a return. Quantities above what the linked invoice carried are
        reported as warnings, not rejected. A return created as processed
        applies its stock effect immediately.
        """
        party = self.party_manager.require_party(party_id)
        expected_party_type = PartyType.CUSTOMER if return_type == ReturnType.SALES else PartyType.SUPPLIER
        if party.party_type != expected_party_type:
            logger.warning(f"{return_type.value.capitalize()} return for {party.party_type.value} '{party.name}'.")

        source_invoice = None
        prior_returns: List[ReturnEntity] = []
        if invoice_id is not None:
            source_invoice = self.invoice_manager.require_invoice(invoice_id)
            if source_invoice.party_id != party.id:
                logger.warning(f"Invoice {source_invoice.invoice_number} belongs to another party than '{party.name}'.")
            prior_returns = self.returns_repo.get_by_invoice_id(invoice_id)

        if gst_percentage is None:
            gst_percentage = source_invoice.gst_percentage if source_invoice else ZERO
        gst_dec = to_amount(gst_percentage)
        if gst_dec < ZERO:
            raise InvalidAmountError("GST percentage cannot be negative.")

        return_date = return_date or date.today()
        ret = ReturnEntity(
            return_number=return_number or self.generate_return_number(return_type, return_date),
            return_type=return_type,
            party_id=party.id,
            return_date=return_date,
            invoice_id=source_invoice.id if source_invoice else None,
            invoice_number=source_invoice.invoice_number if source_invoice else None,
            gst_percentage=gst_dec,
            status=status,
            notes=notes,
            items=self._build_items(items),
        )
        warnings = return_processor.validate_return(ret, source_invoice, prior_returns)

        updated_products = []
        if status == ReturnStatus.PROCESSED:
            changes = stock_ledger.return_stock_changes(ret)
            updated_products = stock_ledger.apply_changes(self.product_manager.products_for(changes), changes)

        self.returns_repo.add(ret)
        self.product_manager.save_stock(updated_products)
        logger.info(f"Return {ret.return_number} (ID: {ret.id}) created for '{party.name}', status {ret.status.value}.")
        for w in warnings:
            logger.warning(f"Return {ret.return_number}: '{w.product_name}' returned {w.returned}, "
                           f"only {w.invoiced} returnable on {ret.invoice_number}.")
        return ReturnSaveResult(return_entity=ret, warnings=warnings)

    def _apply_effect(self, ret: ReturnEntity, effect: StockEffect) -> None:
        changes = stock_ledger.return_stock_changes(ret)
        if effect == StockEffect.APPLY:
            self.product_manager.apply_stock_changes(changes, strict=True)
        elif effect == StockEffect.REVERSE:
            self.product_manager.apply_stock_changes({pid: -c for pid, c in changes.items()}, strict=False)

    def transition_status(self, return_id: int, new_status: ReturnStatus) -> ReturnEntity:
        """Moves a return to new_status; stock is written before the status."""
        ret = self.require_return(return_id)
        updated, effect = return_processor.transition(ret, new_status)
        if updated is ret:
            logger.info(f"Return {ret.return_number} already {ret.status.value}; nothing to do.")
            return ret

        self._apply_effect(ret, effect)
        self.returns_repo.update(updated)
        logger.info(f"Return {ret.return_number} moved {ret.status.value} -> {new_status.value}.")
        return updated

    def process_return(self, return_id: int) -> ReturnEntity:
        return self.transition_status(return_id, ReturnStatus.PROCESSED)

    def reject_return(self, return_id: int) -> ReturnEntity:
        return self.transition_status(return_id, ReturnStatus.REJECTED)

    def delete_return(self, return_id: int) -> None:
        """A processed return has its stock effect reversed before it is removed."""
        ret = self.require_return(return_id)
        self._apply_effect(ret, return_processor.deletion_effect(ret))
        self.returns_repo.delete(return_id)
        logger.info(f"Return {ret.return_number} (ID: {return_id}) deleted.")

    # --- Reads ---

    def require_return(self, return_id: int) -> ReturnEntity:
        ret = self.returns_repo.get_by_id(return_id)
        if ret is None:
            raise NotFoundError("Return", return_id)
        return ret

    def get_all_returns(self) -> List[ReturnEntity]:
        return self.returns_repo.get_all(order_by="return_date DESC, id DESC")

    def get_returns_by_type(self, return_type: ReturnType) -> List[ReturnEntity]:
        return self.returns_repo.get_by_type(return_type)

    def get_returns_by_status(self, status: ReturnStatus) -> List[ReturnEntity]:
        return self.returns_repo.get_by_status(status)

    def get_returns_for_invoice(self, invoice_id: int) -> List[ReturnEntity]:
        return self.returns_repo.get_by_invoice_id(invoice_id)
