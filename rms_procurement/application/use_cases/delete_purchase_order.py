"""Delete Purchase Order Use Case: only untouched drafts can be removed."""

from rms_procurement.application.services import UnitOfWorkFactory
from rms_procurement.config import get_logger
from rms_procurement.core.entities import PurchaseOrderStatus
from rms_procurement.core.exceptions import InvalidPOStateError, PurchaseOrderNotFoundError
from rms_procurement.core.interfaces import IUnitOfWork
from rms_procurement.core.services import PurchaseOrderStateMachine

logger = get_logger(__name__)

DELETABLE_STATUSES = frozenset({PurchaseOrderStatus.DRAFT})


class DeletePurchaseOrderUseCase:
    """Delete a DRAFT purchase order that has no goods receipts."""

    def __init__(self, uow_factory: UnitOfWorkFactory | None = None):
        self._uow_factory = uow_factory

    def _new_uow(self) -> IUnitOfWork:
        if self._uow_factory is None:
            from rms_procurement.application.services import get_unit_of_work_factory

            self._uow_factory = get_unit_of_work_factory()
        return self._uow_factory()

    async def execute(self, po_id: int) -> None:
        async with self._new_uow() as uow:
            po = await uow.purchase_orders.get(po_id)
            if po is None:
                raise PurchaseOrderNotFoundError(po_id)
            PurchaseOrderStateMachine.ensure_status(po, DELETABLE_STATUSES, "delete")

            if await uow.goods_receipts.count_for_po(po_id) > 0:
                raise InvalidPOStateError(
                    po_id=po_id,
                    status=po.status.value,
                    allowed=[],
                    operation="delete (has goods receipts)",
                )
            await uow.purchase_orders.delete(po_id)

        logger.info("delete_purchase_order_complete", po_id=po_id)
