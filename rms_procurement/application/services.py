"""
Service factory functions for dependency injection.

Wires infrastructure implementations to core services. Use cases import
from here instead of reaching into infrastructure themselves.
"""

from collections.abc import Callable

from rms_procurement.config import get_settings
from rms_procurement.core.interfaces import IUnitOfWork
from rms_procurement.core.services import GoodsReceiptProcessor

UnitOfWorkFactory = Callable[[], IUnitOfWork]

# Singleton service instances
_goods_receipt_processor: GoodsReceiptProcessor | None = None


def get_unit_of_work_factory() -> UnitOfWorkFactory:
    """Factory producing a fresh SQLite unit of work per call."""
    from rms_procurement.infrastructure.storage.sqlite import get_unit_of_work

    return get_unit_of_work


def get_goods_receipt_processor(
    uow_factory: UnitOfWorkFactory | None = None,
) -> GoodsReceiptProcessor:
    """
    Get or create the GoodsReceiptProcessor.

    A processor built with an explicit uow_factory is not cached.
    """
    global _goods_receipt_processor
    timeout = get_settings().procurement.receipt_timeout_seconds

    if uow_factory is not None:
        return GoodsReceiptProcessor(uow_factory, timeout_seconds=timeout)

    if _goods_receipt_processor is None:
        _goods_receipt_processor = GoodsReceiptProcessor(
            get_unit_of_work_factory(), timeout_seconds=timeout
        )
    return _goods_receipt_processor


def reset_services() -> None:
    """Drop cached services (for testing)."""
    global _goods_receipt_processor
    _goods_receipt_processor = None


def clamp_page_size(limit: int | None) -> int:
    """Apply the configured default and maximum page size."""
    settings = get_settings().procurement
    if not limit or limit < 1:
        return settings.default_page_size
    return min(limit, settings.max_page_size)
