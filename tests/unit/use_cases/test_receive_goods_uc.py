"""Tests for ReceiveGoodsUseCase."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from rms_procurement.application.dto.requests import ReceiveGoodsLineRequest, ReceiveGoodsRequest
from rms_procurement.application.use_cases import ReceiveGoodsUseCase
from rms_procurement.core.entities import GoodsReceipt, GoodsReceiptItem
from rms_procurement.core.services import GoodsReceiptProcessor, ReceiveGoodsResult


@pytest.fixture
def mock_processor(sent_purchase_order):
    processor = AsyncMock(spec=GoodsReceiptProcessor)
    processor.receive_goods.return_value = ReceiveGoodsResult(
        receipt=GoodsReceipt(
            id=1,
            grn_number="GRN-202610-0001",
            purchase_order_id=7,
            received_by_employee_id="EMP-1",
            items=[GoodsReceiptItem(id=1, purchase_order_item_id=11, quantity_received=Decimal("5"))],
        ),
        purchase_order=sent_purchase_order,
    )
    return processor


class TestReceiveGoodsUseCase:
    async def test_maps_request_to_lines(self, mock_processor):
        use_case = ReceiveGoodsUseCase(processor=mock_processor)
        request = ReceiveGoodsRequest(
            received_by_employee_id="EMP-1",
            items=[
                ReceiveGoodsLineRequest(
                    purchase_order_item_id=11,
                    quantity_received=Decimal("5"),
                    batch_number="LOT-1",
                )
            ],
            notes="pallet damaged",
        )

        await use_case.execute(7, request)

        kwargs = mock_processor.receive_goods.await_args.kwargs
        assert kwargs["po_id"] == 7
        assert kwargs["received_by_employee_id"] == "EMP-1"
        assert kwargs["notes"] == "pallet damaged"
        assert kwargs["items"][0].purchase_order_item_id == 11
        assert kwargs["items"][0].batch_number == "LOT-1"

    async def test_missing_employee_passed_as_blank(self, mock_processor):
        use_case = ReceiveGoodsUseCase(processor=mock_processor)
        await use_case.execute(7, ReceiveGoodsRequest())
        kwargs = mock_processor.receive_goods.await_args.kwargs
        assert kwargs["received_by_employee_id"] == ""
        assert kwargs["items"] == []

    async def test_to_response(self, mock_processor):
        use_case = ReceiveGoodsUseCase(processor=mock_processor)
        result = await use_case.execute(7, ReceiveGoodsRequest(received_by_employee_id="EMP-1"))
        response = use_case.to_response(result)
        assert response.receipt.grn_number == "GRN-202610-0001"
        assert response.purchase_order.id == 7
        assert response.movements == []
