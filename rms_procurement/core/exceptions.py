"""
Domain exceptions for the procurement core.

Every error kind carries a stable machine-readable code. Validation errors
are raised before any write; failures inside a receipt transaction surface
as TransactionFailedError or ConcurrencyConflictError after rollback.
"""

from typing import Any


class RMSError(Exception):
    """Base exception for all procurement errors."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> dict:
        """Convert to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


# Lookup Exceptions
class NotFoundError(RMSError):
    """Base exception for missing entities."""

    pass


class PurchaseOrderNotFoundError(NotFoundError):
    """Purchase order not found."""

    def __init__(self, po_id: int):
        super().__init__(
            f"Purchase order not found: {po_id}",
            code="PURCHASE_ORDER_NOT_FOUND",
            details={"po_id": po_id},
        )


class InventoryItemNotFoundError(NotFoundError):
    """Inventory item not found."""

    def __init__(self, item_id: int):
        super().__init__(
            f"Inventory item not found: {item_id}",
            code="INVENTORY_ITEM_NOT_FOUND",
            details={"item_id": item_id},
        )


class LineNotFoundError(NotFoundError):
    """Purchase order line does not belong to the purchase order."""

    def __init__(self, po_id: int, line_id: int):
        super().__init__(
            f"Purchase order item {line_id} not found on purchase order {po_id}",
            code="LINE_NOT_FOUND",
            details={"po_id": po_id, "purchase_order_item_id": line_id},
        )


# Validation Exceptions
class ValidationError(RMSError):
    """Input validation failed."""

    def __init__(
        self,
        field: str,
        message: str,
        value: Any = None,
        code: str = "VALIDATION_ERROR",
    ):
        super().__init__(
            f"Validation error for '{field}': {message}",
            code=code,
            details={
                "field": field,
                "message": message,
                "value": str(value)[:100] if value is not None else None,
            },
        )


class MissingFieldsError(ValidationError):
    """Required request fields are missing or empty."""

    def __init__(self, fields: list[str]):
        super().__init__(
            field=", ".join(fields),
            message=f"Missing required fields: {', '.join(fields)}",
            code="MISSING_FIELDS",
        )
        self.details["fields"] = fields


class InvalidQuantityError(ValidationError):
    """Quantity (or cost) outside its allowed range."""

    def __init__(self, field: str, value: Any, message: str = "must be greater than 0"):
        super().__init__(
            field=field,
            message=message,
            value=value,
            code="INVALID_QUANTITY",
        )


class DuplicateSkuError(ValidationError):
    """Inventory item with the same SKU already exists in the outlet."""

    def __init__(self, outlet_id: str, sku: str):
        super().__init__(
            field="sku",
            message=f"An item with SKU '{sku}' already exists in outlet '{outlet_id}'",
            value=sku,
            code="DUPLICATE_SKU",
        )
        self.details["outlet_id"] = outlet_id


# Workflow Exceptions
class WorkflowError(RMSError):
    """Base exception for purchase order workflow violations."""

    pass


class InvalidPOStateError(WorkflowError):
    """Operation not allowed in the purchase order's current status."""

    def __init__(self, po_id: int | None, status: str, allowed: list[str], operation: str):
        super().__init__(
            f"Cannot {operation} purchase order in status {status}; "
            f"allowed: {', '.join(allowed) or 'none'}",
            code="INVALID_PO_STATE",
            details={
                "po_id": po_id,
                "status": status,
                "allowed": allowed,
                "operation": operation,
            },
        )


class InvalidTransitionError(WorkflowError):
    """Status change not present in the transition table."""

    def __init__(self, from_status: str, to_status: str, allowed: list[str]):
        super().__init__(
            f"Invalid status transition from {from_status} to {to_status}",
            code="INVALID_TRANSITION",
            details={"from": from_status, "to": to_status, "allowed": allowed},
        )


class OverReceiptError(WorkflowError):
    """Receipt would push received quantity past the ordered quantity."""

    def __init__(self, line_id: int, ordered: Any, already_received: Any, requested: Any):
        super().__init__(
            f"Cannot receive {requested} on purchase order item {line_id}: "
            f"ordered {ordered}, already received {already_received}",
            code="OVER_RECEIPT",
            details={
                "purchase_order_item_id": line_id,
                "ordered": str(ordered),
                "already_received": str(already_received),
                "requested": str(requested),
            },
        )


# Storage Exceptions
class StorageError(RMSError):
    """Base exception for storage operations."""

    pass


class ConcurrencyConflictError(StorageError):
    """The write lock could not be obtained; the whole call can be retried."""

    def __init__(self, operation: str, reason: str | None = None):
        super().__init__(
            f"Concurrent update conflict during {operation}, retry the request",
            code="CONCURRENCY_CONFLICT",
            details={"operation": operation, "reason": reason},
        )


class TransactionFailedError(StorageError):
    """The atomic transaction was aborted and rolled back."""

    def __init__(self, operation: str, error: str):
        super().__init__(
            f"Transaction failed during {operation}: {error}",
            code="TRANSACTION_FAILED",
            details={"operation": operation, "error": error},
        )


class ConfigurationError(RMSError):
    """Configuration error."""

    pass
