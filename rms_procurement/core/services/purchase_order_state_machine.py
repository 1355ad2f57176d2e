"""
Purchase order status workflow.

The transition table is the single source of truth for which status
changes are legal. Every status must have an entry; terminal statuses map
to an empty set.
"""

from datetime import datetime

from rms_procurement.config import get_logger
from rms_procurement.core.entities.common import utcnow
from rms_procurement.core.entities.purchase_order import (
    PurchaseOrder,
    PurchaseOrderStatus,
)
from rms_procurement.core.exceptions import (
    ConfigurationError,
    InvalidPOStateError,
    InvalidTransitionError,
)

logger = get_logger(__name__)

S = PurchaseOrderStatus

ALLOWED_TRANSITIONS: dict[PurchaseOrderStatus, frozenset[PurchaseOrderStatus]] = {
    S.DRAFT: frozenset({S.PENDING_APPROVAL, S.CANCELLED}),
    S.PENDING_APPROVAL: frozenset({S.APPROVED, S.DRAFT, S.CANCELLED}),
    S.APPROVED: frozenset({S.SENT, S.CANCELLED}),
    S.SENT: frozenset({S.PARTIALLY_RECEIVED, S.RECEIVED, S.CANCELLED}),
    S.PARTIALLY_RECEIVED: frozenset({S.RECEIVED}),
    S.RECEIVED: frozenset(),
    S.CANCELLED: frozenset(),
}

_missing = set(PurchaseOrderStatus) - set(ALLOWED_TRANSITIONS)
if _missing:
    raise ConfigurationError(
        f"Transition table has no entry for: {sorted(s.value for s in _missing)}"
    )

# Statuses in which goods may be received
RECEIVABLE_STATUSES = frozenset({S.SENT, S.PARTIALLY_RECEIVED})

# Statuses in which lines, tax and dates may still be edited
EDITABLE_STATUSES = frozenset({S.DRAFT, S.PENDING_APPROVAL})


def _names(statuses) -> list[str]:
    return sorted(s.value for s in statuses)


class PurchaseOrderStateMachine:
    """Validates and applies purchase order status changes."""

    @staticmethod
    def allowed_targets(status: PurchaseOrderStatus) -> frozenset[PurchaseOrderStatus]:
        return ALLOWED_TRANSITIONS[status]

    @staticmethod
    def can_transition(from_status: PurchaseOrderStatus, to_status: PurchaseOrderStatus) -> bool:
        return to_status in ALLOWED_TRANSITIONS[from_status]

    def transition(
        self,
        po: PurchaseOrder,
        target: PurchaseOrderStatus,
        employee_id: str | None = None,
        now: datetime | None = None,
    ) -> PurchaseOrder:
        """
        Move a purchase order to a new status.

        Records approver and approval time on APPROVED, send time on SENT and
        the received date on RECEIVED. An approval without an employee id is
        accepted and leaves the approver unset.

        Raises:
            InvalidTransitionError: If the change is not in the transition table.
        """
        if not self.can_transition(po.status, target):
            raise InvalidTransitionError(
                from_status=po.status.value,
                to_status=target.value,
                allowed=_names(ALLOWED_TRANSITIONS[po.status]),
            )

        now = now or utcnow()
        previous = po.status
        po.status = target

        if target == S.APPROVED:
            po.approved_at = now
            if employee_id:
                po.approved_by_employee_id = employee_id
        elif target == S.SENT:
            po.sent_at = now
        elif target == S.RECEIVED:
            po.received_date = now

        po.updated_at = now

        logger.info(
            "po_status_changed",
            po_id=po.id,
            from_status=previous.value,
            to_status=target.value,
            employee_id=employee_id,
        )
        return po

    @staticmethod
    def derive_status_after_receipt(po: PurchaseOrder) -> PurchaseOrderStatus:
        """
        Compute the status implied by the lines' received quantities.

        RECEIVED when every line is complete, PARTIALLY_RECEIVED when any
        line has received something, otherwise the current status.
        """
        if po.status not in RECEIVABLE_STATUSES:
            raise InvalidPOStateError(
                po_id=po.id,
                status=po.status.value,
                allowed=_names(RECEIVABLE_STATUSES),
                operation="derive receipt status of",
            )

        if po.items and all(line.received_qty >= line.quantity for line in po.items):
            return S.RECEIVED
        if any(line.received_qty > 0 for line in po.items):
            return S.PARTIALLY_RECEIVED
        return po.status

    @staticmethod
    def ensure_status(po: PurchaseOrder, allowed: frozenset[PurchaseOrderStatus], operation: str) -> None:
        """Raise InvalidPOStateError unless the order is in one of the allowed statuses."""
        if po.status not in allowed:
            raise InvalidPOStateError(
                po_id=po.id,
                status=po.status.value,
                allowed=_names(allowed),
                operation=operation,
            )
