# billing/exceptions.py
"""Error kinds raised by the reconciliation engines and their managers.

Store failures are not listed here: ``sqlite3.Error`` propagates unchanged from
the data access layer.
"""


class BillingError(Exception):
    """Base class for all billing errors."""


class NotFoundError(BillingError, LookupError):
    def __init__(self, entity_name: str, entity_id):
        self.entity_name = entity_name
        self.entity_id = entity_id
        super().__init__(f"{entity_name} with ID {entity_id} not found.")


class InvalidQuantityError(BillingError, ValueError):
    pass


class InvalidAmountError(BillingError, ValueError):
    pass


class InvalidStatusError(BillingError, ValueError):
    pass


class InvalidLineItemError(BillingError, ValueError):
    pass
