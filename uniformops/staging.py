import logging
from typing import Any, Dict, Iterable, List

from .backend import Backend, Row
from .errors import StagingNotFound, StagingNotPending
from .metrics import ORDERS_STAGED
from .models import ImportStatus
from .schemas import StagingOrder

logger = logging.getLogger(__name__)

TABLE = "imported_orders"
EDITABLE_FIELDS = ("school", "customer_name", "phone", "payment_status", "parsed_items")


def to_row(order: StagingOrder) -> Row:
    return {
        "raw_header": order.raw_header,
        "customer_name": order.customer_name,
        "phone": order.phone or None,
        "school": order.school,
        "payment_status": order.payment_status.value,
        "original_text": "\n".join(order.raw_lines),
        "raw_items": list(order.items),
        "parsed_items": [it.model_dump() for it in order.parsed_items],
        "status": ImportStatus.PENDING.value,
    }


class StagingStore:
    """The imported_orders queue between a parser run and human review."""

    def __init__(self, backend: Backend, chunk_size: int = 20):
        self.backend = backend
        self.chunk_size = chunk_size

    def insert_batch(self, orders: Iterable[StagingOrder]) -> List[Row]:
        rows = [to_row(o) for o in orders]
        created: List[Row] = []
        for start in range(0, len(rows), self.chunk_size):
            chunk = rows[start:start + self.chunk_size]
            # a failing chunk aborts the batch; earlier chunks stay staged
            created.extend(self.backend.insert(TABLE, chunk))
            logger.info("Staged batch %s - %s", start, start + len(chunk))
        ORDERS_STAGED.inc(len(created))
        return created

    def list_pending(self) -> List[Row]:
        return self.backend.select(TABLE, eq={"status": ImportStatus.PENDING.value}, order_by=("created_at", "id"))

    def get(self, import_id: int) -> Row:
        row = self.backend.get(TABLE, import_id)
        if row is None:
            raise StagingNotFound(import_id)
        return row

    def _guarded_update(self, import_id: int, patch: Dict[str, Any]) -> None:
        changed = self.backend.update(TABLE, patch, eq={"id": import_id, "status": ImportStatus.PENDING.value})
        if changed == 0:
            row = self.get(import_id)
            raise StagingNotPending(import_id, row["status"])

    def update_fields(self, import_id: int, patch: Dict[str, Any]) -> Row:
        unknown = set(patch) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"not editable: {sorted(unknown)}")
        if not patch:
            row = self.get(import_id)
            if row["status"] != ImportStatus.PENDING.value:
                raise StagingNotPending(import_id, row["status"])
            return row
        self._guarded_update(import_id, patch)
        return self.get(import_id)

    def set_status(self, import_id: int, status: ImportStatus) -> Row:
        if status == ImportStatus.PENDING:
            raise ValueError("a staged order cannot return to pending")
        self._guarded_update(import_id, {"status": status.value})
        logger.info("Imported order %s marked %s", import_id, status.value)
        return self.get(import_id)
