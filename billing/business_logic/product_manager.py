# billing/business_logic/product_manager.py
from dataclasses import dataclass, field
from typing import Optional, List, Any, Dict, Mapping, TYPE_CHECKING
from decimal import Decimal
from datetime import date

from billing.business_logic.entities.product_entity import ProductEntity
from billing.business_logic.entities.stock_adjustment_entity import StockAdjustmentEntity
from billing.business_logic.entities.stock_movement_entry import StockMovementEntry
from billing.business_logic import stock_ledger
from billing.business_logic.invoice_status import to_amount
from billing.config import DEFAULT_LOW_STOCK_ALERT, DEFAULT_UNIT
from billing.constants import StockStatus, ZERO
from billing.exceptions import NotFoundError, InvalidQuantityError, InvalidAmountError

if TYPE_CHECKING:
    from ..data_access.products_repository import ProductsRepository
    from ..data_access.stock_adjustments_repository import StockAdjustmentsRepository
    from ..data_access.invoices_repository import InvoicesRepository
    from ..data_access.returns_repository import ReturnsRepository
    from ..data_access.parties_repository import PartiesRepository

import logging
logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockReconciliation:
    product_id: int
    recorded_stock: int
    expected_stock: int
    repaired: bool = False

    @property
    def drift(self) -> int:
        return self.recorded_stock - self.expected_stock

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0


@dataclass(frozen=True)
class InventoryStats:
    total_products: int
    in_stock: int
    low_stock: int
    out_of_stock: int
    inventory_value: Decimal = field(default_factory=lambda: Decimal("0.00"))


class ProductManager:
    def __init__(self,
                 products_repository: 'ProductsRepository',
                 stock_adjustments_repository: 'StockAdjustmentsRepository',
                 invoices_repository: 'InvoicesRepository',
                 returns_repository: 'ReturnsRepository',
                 parties_repository: 'PartiesRepository',
                 low_stock_alert: int = DEFAULT_LOW_STOCK_ALERT):
        if products_repository is None:
            raise ValueError("products_repository cannot be None")
        self.products_repo = products_repository
        self.adjustments_repo = stock_adjustments_repository
        self.invoices_repo = invoices_repository
        self.returns_repo = returns_repository
        self.parties_repo = parties_repository
        self.low_stock_alert = low_stock_alert

    # --- CRUD ---

    def create_product(self,
                       name: str,
                       price: Any = Decimal("0.00"),
                       cost_price: Any = Decimal("0.00"),
                       stock: int = 0,
                       low_stock_alert: Optional[int] = None,
                       unit: str = DEFAULT_UNIT,
                       description: Optional[str] = None) -> ProductEntity:
        if not name or not name.strip():
            raise ValueError("Product name cannot be empty.")
        price_dec = to_amount(price)
        cost_dec = to_amount(cost_price)
        if price_dec < ZERO or cost_dec < ZERO:
            raise InvalidAmountError("Product price and cost price cannot be negative.")
        if low_stock_alert is not None and low_stock_alert < 0:
            raise InvalidQuantityError("Low stock alert cannot be negative.")

        product = ProductEntity(
            name=name.strip(),
            price=price_dec,
            cost_price=cost_dec,
            stock=int(stock or 0),
            opening_stock=int(stock or 0),
            low_stock_alert=low_stock_alert,
            unit=unit or DEFAULT_UNIT,
            description=description,
        )
        created = self.products_repo.add(product)
        logger.info(f"Product '{created.name}' (ID: {created.id}) created with opening stock {created.opening_stock}.")
        return created

    def get_product_by_id(self, product_id: int) -> Optional[ProductEntity]:
        product = self.products_repo.get_by_id(product_id)
        if not product:
            logger.warning(f"Product with ID {product_id} not found.")
        return product

    def require_product(self, product_id: int) -> ProductEntity:
        product = self.products_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError("Product", product_id)
        return product

    def get_all_products(self) -> List[ProductEntity]:
        return self.products_repo.get_all(order_by="name ASC")

    def search_products(self, name_query: str) -> List[ProductEntity]:
        return self.products_repo.search_by_name(name_query)

    def update_product(self, product_id: int, update_data: Dict[str, Any]) -> ProductEntity:
        """Updates descriptive fields. Stock only moves through documents and adjust_stock."""
        product = self.require_product(product_id)

        changed = False
        for key, value in update_data.items():
            if key in ("stock", "opening_stock", "id"):
                logger.warning(f"Attempt to update '{key}' via update_product for product ID {product_id} was ignored. Use adjust_stock.")
                continue
            if not hasattr(product, key):
                logger.warning(f"Field '{key}' not found in ProductEntity during update of product ID {product_id}.")
                continue

            processed_value = value
            if key in ("price", "cost_price"):
                processed_value = to_amount(value)
                if processed_value < ZERO:
                    raise InvalidAmountError(f"{key} cannot be negative.")
            if getattr(product, key) != processed_value:
                setattr(product, key, processed_value)
                changed = True

        if changed:
            self.products_repo.update(product)
            logger.info(f"Product ID {product_id} updated.")
        else:
            logger.info(f"No changes detected for product ID {product_id}. Update not performed.")
        return product

    def delete_product(self, product_id: int) -> None:
        """
        Removes the product. Invoice and return lines keep their product name;
        later reversals of those documents skip the missing product.
        """
        product = self.require_product(product_id)
        self.products_repo.delete(product_id)
        logger.info(f"Product '{product.name}' (ID: {product_id}) deleted.")

    # --- Stock writes ---

    def products_for(self, product_ids) -> Dict[int, ProductEntity]:
        found = {}
        for product_id in set(product_ids):
            product = self.products_repo.get_by_id(product_id)
            if product is not None:
                found[product_id] = product
        return found

    def save_stock(self, updated_products: List[ProductEntity]) -> None:
        for product in updated_products:
            self.products_repo.update(product)
            logger.info(f"Stock for product '{product.name}' (ID: {product.id}) is now {product.stock}.")

    def apply_stock_changes(self, changes: Mapping[int, int], strict: bool = True) -> List[ProductEntity]:
        """Loads the products named in changes, applies the signed quantities and persists them."""
        products = self.products_for(changes.keys())
        updated = stock_ledger.apply_changes(products, changes, strict=strict)
        self.save_stock(updated)
        return updated

    def adjust_stock(self,
                     product_id: int,
                     quantity_change: int,
                     adjustment_date: Optional[date] = None,
                     reason: Optional[str] = None) -> ProductEntity:
        """Manual correction (count, damage, loss). Recorded so movement history stays complete."""
        if not quantity_change:
            raise InvalidQuantityError("Stock adjustment must change the quantity.")
        product = self.require_product(product_id)

        adjustment = StockAdjustmentEntity(
            product_id=product_id,
            quantity_change=int(quantity_change),
            adjustment_date=adjustment_date or date.today(),
            reason=reason,
        )
        updated = stock_ledger.apply_changes({product_id: product}, {product_id: adjustment.quantity_change})
        self.save_stock(updated)
        self.adjustments_repo.add(adjustment)
        logger.info(f"Stock for '{product.name}' (ID: {product_id}) adjusted by {quantity_change}: "
                    f"{product.stock} -> {updated[0].stock}. Reason: {reason or '-'}")
        return updated[0]

    # --- Stock reads ---

    def current_stock(self, product_id: int) -> int:
        return stock_ledger.current_stock(self.require_product(product_id))

    def movement_history(self, product_id: int) -> List[StockMovementEntry]:
        product = self.require_product(product_id)
        parties = stock_ledger.index_by_id(self.parties_repo.get_all())
        return stock_ledger.movement_history(
            product,
            invoices=self.invoices_repo.get_all(order_by="invoice_date ASC, id ASC"),
            parties=parties,
            returns=self.returns_repo.get_all(order_by="return_date ASC, id ASC"),
            adjustments=self.adjustments_repo.get_by_product_id(product_id),
        )

    def reconcile_stock(self, product_id: int, repair: bool = False) -> StockReconciliation:
        """Compares stored stock with opening stock plus the movement history."""
        product = self.require_product(product_id)
        expected = stock_ledger.expected_stock(product, self.movement_history(product_id))
        result = StockReconciliation(product_id=product_id, recorded_stock=product.stock, expected_stock=expected)
        if result.is_consistent:
            return result

        logger.warning(f"Stock drift for '{product.name}' (ID: {product_id}): recorded {product.stock}, expected {expected}.")
        if repair:
            product.stock = expected
            self.products_repo.update(product)
            logger.info(f"Stock for '{product.name}' (ID: {product_id}) repaired to {expected}.")
            result = StockReconciliation(product_id, result.recorded_stock, expected, repaired=True)
        return result

    def stock_status(self, product_id: int) -> StockStatus:
        return stock_ledger.stock_status(self.require_product(product_id), self.low_stock_alert)

    def _products_with_status(self, status: StockStatus) -> List[ProductEntity]:
        return [p for p in self.get_all_products()
                if stock_ledger.stock_status(p, self.low_stock_alert) == status]

    def get_low_stock_products(self) -> List[ProductEntity]:
        return self._products_with_status(StockStatus.LOW_STOCK)

    def get_out_of_stock_products(self) -> List[ProductEntity]:
        return self._products_with_status(StockStatus.OUT_OF_STOCK)

    def inventory_stats(self) -> InventoryStats:
        counts = {status: 0 for status in StockStatus}
        value = Decimal("0.00")
        products = self.get_all_products()
        for product in products:
            counts[stock_ledger.stock_status(product, self.low_stock_alert)] += 1
            # Oversold quantities carry no value.
            value += Decimal(max(0, product.stock)) * product.price
        return InventoryStats(
            total_products=len(products),
            in_stock=counts[StockStatus.IN_STOCK],
            low_stock=counts[StockStatus.LOW_STOCK],
            out_of_stock=counts[StockStatus.OUT_OF_STOCK],
            inventory_value=value,
        )
