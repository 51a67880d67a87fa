import threading
from typing import Dict
from uuid import uuid4

from receipt import Receipt


class ReceiptNotFound(KeyError):
    def __init__(self, receipt_id: str):
        self.receipt_id = receipt_id
        super().__init__(receipt_id)

    def __str__(self):
        return f"Error: receipt id not found ({self.receipt_id})"


class ReceiptStore:
    """
    In-memory receipt storage keyed by a generated UUID4 string.

    Receipts are immutable, so a stored receipt can be handed out to
    concurrent readers; the lock only guards the map itself.
    """

    def __init__(self):
        self._receipts: Dict[str, Receipt] = {}
        self._lock = threading.Lock()

    def add(self, receipt: Receipt) -> str:
        with self._lock:
            receipt_id = str(uuid4())
            while receipt_id in self._receipts:
                receipt_id = str(uuid4())
            self._receipts[receipt_id] = receipt
        return receipt_id

    def get(self, receipt_id: str) -> Receipt:
        with self._lock:
            try:
                return self._receipts[receipt_id]
            except KeyError:
                raise ReceiptNotFound(receipt_id) from None

    def __contains__(self, receipt_id) -> bool:
        with self._lock:
            return receipt_id in self._receipts

    def __len__(self) -> int:
        with self._lock:
            return len(self._receipts)
