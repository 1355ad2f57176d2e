"""RMS procurement: purchase orders, goods receipts and the stock ledger."""

__version__ = "1.0.0"
