"""Update Purchase Order Use Case: full update or workflow action."""

from dataclasses import dataclass

from rms_procurement.application.dto.mappers import purchase_order_to_response
from rms_procurement.application.dto.requests import FullUpdateRequest, StatusActionRequest
from rms_procurement.application.dto.responses import PurchaseOrderResponse
from rms_procurement.application.services import UnitOfWorkFactory
from rms_procurement.application.use_cases.change_purchase_order_status import (
    ChangePurchaseOrderStatusUseCase,
)
from rms_procurement.application.use_cases.create_purchase_order import (
    build_items,
    validate_lines,
)
from rms_procurement.config import get_logger
from rms_procurement.core.entities import PurchaseOrder, utcnow
from rms_procurement.core.exceptions import PurchaseOrderNotFoundError
from rms_procurement.core.interfaces import IUnitOfWork
from rms_procurement.core.services import EDITABLE_STATUSES, PurchaseOrderStateMachine

logger = get_logger(__name__)


@dataclass
class UpdatePurchaseOrderResult:
    """Result of updating a purchase order."""

    purchase_order: PurchaseOrder


class UpdatePurchaseOrderUseCase:
    """
    Apply one of the two update variants to a purchase order.

    A FullUpdateRequest edits lines, tax rate, expected date and notes
    while the order is DRAFT or PENDING_APPROVAL. A StatusActionRequest is
    handed to ChangePurchaseOrderStatusUseCase.
    """

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

    async def execute(
        self, po_id: int, update: FullUpdateRequest | StatusActionRequest
    ) -> UpdatePurchaseOrderResult:
        """Execute update purchase order use case."""
        if isinstance(update, StatusActionRequest):
            status_use_case = ChangePurchaseOrderStatusUseCase(
                uow_factory=self._uow_factory, state_machine=self._state_machine
            )
            result = await status_use_case.execute(po_id, update)
            return UpdatePurchaseOrderResult(purchase_order=result.purchase_order)
        return await self._full_update(po_id, update)

    async def _full_update(
        self, po_id: int, update: FullUpdateRequest
    ) -> UpdatePurchaseOrderResult:
        if update.items is not None:
            validate_lines(update.items)

        async with self._new_uow() as uow:
            po = await uow.purchase_orders.get(po_id)
            if po is None:
                raise PurchaseOrderNotFoundError(po_id)
            self._state_machine.ensure_status(po, EDITABLE_STATUSES, "update")

            if update.items is not None:
                po.items = await build_items(uow.inventory, po.outlet_id, update.items)
                await uow.purchase_orders.replace_items(po)
            if update.tax_rate is not None:
                po.tax_rate = update.tax_rate
            if update.expected_date is not None:
                po.expected_date = update.expected_date
            if update.notes is not None:
                po.notes = update.notes

            po.recalculate_totals()
            po.updated_at = utcnow()
            po = await uow.purchase_orders.update(po)

        logger.info(
            "purchase_order_updated",
            po_id=po_id,
            lines_replaced=update.items is not None,
            total=str(po.total),
        )
        return UpdatePurchaseOrderResult(purchase_order=po)

    def to_response(self, result: UpdatePurchaseOrderResult) -> PurchaseOrderResponse:
        """Convert result to API response."""
        return purchase_order_to_response(result.purchase_order)
