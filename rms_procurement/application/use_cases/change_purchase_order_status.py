"""Change Purchase Order Status Use Case: submit, approve, send, cancel."""

from dataclasses import dataclass

from rms_procurement.application.dto.mappers import purchase_order_to_response
from rms_procurement.application.dto.requests import StatusAction, StatusActionRequest
from rms_procurement.application.dto.responses import PurchaseOrderResponse
from rms_procurement.application.services import UnitOfWorkFactory
from rms_procurement.config import get_logger
from rms_procurement.core.entities import PurchaseOrder, PurchaseOrderStatus
from rms_procurement.core.exceptions import PurchaseOrderNotFoundError
from rms_procurement.core.interfaces import IUnitOfWork
from rms_procurement.core.services import PurchaseOrderStateMachine

logger = get_logger(__name__)

ACTION_TARGETS: dict[str, PurchaseOrderStatus] = {
    "submit": PurchaseOrderStatus.PENDING_APPROVAL,
    "approve": PurchaseOrderStatus.APPROVED,
    "return_to_draft": PurchaseOrderStatus.DRAFT,
    "send": PurchaseOrderStatus.SENT,
    "cancel": PurchaseOrderStatus.CANCELLED,
}


@dataclass
class ChangeStatusResult:
    """Result of a status change."""

    purchase_order: PurchaseOrder
    previous_status: PurchaseOrderStatus


class ChangePurchaseOrderStatusUseCase:
    """Apply a workflow action to a purchase order through the state machine."""

    def __init__(
        self,
        uow_factory: UnitOfWorkFactory | None = None,
        state_machine: PurchaseOrderStateMachine | None = None,
    ):
        self._uow_factory = uow_factory
        self._state_machine = state_machine or PurchaseOrderStateMachine()

    def _new_uow(self) -> IUnitOfWork:
        if self._uow_factory is None:
            from rms_procurement.application.services import get_unit_of_work_factory

            self._uow_factory = get_unit_of_work_factory()
        return self._uow_factory()

    async def execute(self, po_id: int, request: StatusActionRequest) -> ChangeStatusResult:
        """Execute the requested action."""
        return await self._apply(po_id, request.action, request.employee_id)

    async def submit(self, po_id: int, employee_id: str | None = None) -> ChangeStatusResult:
        return await self._apply(po_id, "submit", employee_id)

    async def approve(self, po_id: int, employee_id: str | None = None) -> ChangeStatusResult:
        return await self._apply(po_id, "approve", employee_id)

    async def return_to_draft(
        self, po_id: int, employee_id: str | None = None
    ) -> ChangeStatusResult:
        return await self._apply(po_id, "return_to_draft", employee_id)

    async def send(self, po_id: int, employee_id: str | None = None) -> ChangeStatusResult:
        return await self._apply(po_id, "send", employee_id)

    async def cancel(self, po_id: int, employee_id: str | None = None) -> ChangeStatusResult:
        return await self._apply(po_id, "cancel", employee_id)

    async def _apply(
        self, po_id: int, action: StatusAction, employee_id: str | None
    ) -> ChangeStatusResult:
        target = ACTION_TARGETS[action]
        async with self._new_uow() as uow:
            po = await uow.purchase_orders.get(po_id)
            if po is None:
                raise PurchaseOrderNotFoundError(po_id)
            previous = po.status
            self._state_machine.transition(po, target, employee_id)
            po = await uow.purchase_orders.update(po)

        logger.info(
            "po_action_applied",
            po_id=po_id,
            action=action,
            from_status=previous.value,
            to_status=po.status.value,
        )
        return ChangeStatusResult(purchase_order=po, previous_status=previous)

    def to_response(self, result: ChangeStatusResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return purchase_order_to_response(result.purchase_order)
