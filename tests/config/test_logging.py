"""Tests for structlog configuration."""

import json
from datetime import date
from decimal import Decimal
from unittest.mock import MagicMock

import structlog

from rms_procurement.config import logging as log_config
from rms_procurement.core.entities import PurchaseOrderStatus


def test_domain_values_rendered_as_strings():
    event = {
        "event": "stock_receipt_applied",
        "quantity": Decimal("5.000"),
        "status": PurchaseOrderStatus.RECEIVED,
        "expiry_date": date(2026, 11, 1),
        "allowed": [PurchaseOrderStatus.SENT, PurchaseOrderStatus.PARTIALLY_RECEIVED],
        "po_id": 7,
    }

    rendered = log_config.render_domain_values(None, "info", event)

    assert rendered["quantity"] == "5.000"
    assert rendered["status"] == "RECEIVED"
    assert rendered["expiry_date"] == "2026-11-01"
    assert rendered["allowed"] == ["SENT", "PARTIALLY_RECEIVED"]
    assert rendered["po_id"] == 7


def test_json_output_keeps_decimal_scale():
    event = log_config.render_domain_values(None, "info", {"event": "x", "new_avg": Decimal("110.150000")})
    line = structlog.processors.JSONRenderer()(None, "info", event)
    assert json.loads(line)["new_avg"] == "110.150000"


def test_service_context_does_not_override_bound_values():
    event = log_config.add_service_context(None, "info", {"event": "x", "environment": "test"})
    assert event["environment"] == "test"
    assert event["service"]


def test_configure_logging_runs_once(monkeypatch):
    configure = MagicMock()
    monkeypatch.setattr(log_config.structlog, "configure", configure)
    monkeypatch.setattr(log_config.logging, "basicConfig", MagicMock())
    monkeypatch.setattr(log_config, "_configured", False)

    log_config.configure_logging()
    log_config.configure_logging()
    assert configure.call_count == 1

    log_config.configure_logging(force=True)
    assert configure.call_count == 2
