"""Approval and rejection of staged imports.

Approval runs as a chain of independent backend calls: the customer id is
needed for the order, the order id for its items. A failure anywhere leaves
the staged row pending so the reviewer can retry; writes that already
happened are kept.
"""
import logging
from datetime import date
from typing import List, Optional

from pydantic import ValidationError

from .backend import Backend
from .errors import BackendError, ConfirmationRequired, InvalidInput, StagingNotPending
from .match import resolve_customer
from .metrics import IMPORTS_REVIEWED
from .models import DeliveryStatus, ImportStatus
from .schemas import ApprovalResult, ImportEdit, ParsedItem
from .staging import StagingStore

logger = logging.getLogger(__name__)


def edit_import(store: StagingStore, import_id: int, edits: ImportEdit):
    patch = edits.model_dump(exclude_unset=True, exclude_none=True)
    return store.update_fields(import_id, patch)


def _items_of(row) -> List[ParsedItem]:
    try:
        return [ParsedItem.model_validate(it) for it in (row.get("parsed_items") or [])]
    except ValidationError as e:
        raise InvalidInput(f"invalid item on imported order {row['id']}: {e.errors()[0]['msg']}") from e


def approve_import(store: StagingStore, import_id: int, edits: Optional[ImportEdit] = None,
                   created_by: Optional[int] = None, today: Optional[date] = None) -> ApprovalResult:
    backend: Backend = store.backend
    row = store.get(import_id)
    if row["status"] != ImportStatus.PENDING.value:
        raise StagingNotPending(import_id, row["status"])

    if edits is not None:
        row = edit_import(store, import_id, edits)

    name = (row.get("customer_name") or "").strip()
    if not name:
        raise InvalidInput("customer name is required")
    items = _items_of(row)
    if created_by is not None and backend.get("profiles", created_by) is None:
        raise InvalidInput(f"profile {created_by} does not exist")

    try:
        customer, reason = resolve_customer(backend, name, row.get("phone"), row.get("school"))
        order = backend.insert("orders", [{
            "customer_id": customer["id"],
            "school": row.get("school"),
            "purchase_date": today or date.today(),
            "payment_status": row.get("payment_status"),
            "delivery_status": DeliveryStatus.PENDING.value,
            "total_amount": 0,
            "amount_paid": 0,
            "created_by": created_by,
        }])[0]
        if items:
            backend.insert("order_items", [{
                "order_id": order["id"],
                "product_name": it.product,
                "size": it.size,
                "quantity": it.quantity,
                "unit_price": 0,
                "quantity_delivered": 0,
            } for it in items])
        store.set_status(import_id, ImportStatus.APPROVED)
    except BackendError:
        IMPORTS_REVIEWED.labels(outcome="failed").inc()
        logger.exception("Approval of imported order %s failed", import_id)
        raise

    IMPORTS_REVIEWED.labels(outcome="approved").inc()
    logger.info("Imported order %s approved as order %s (%s items)", import_id, order["id"], len(items))
    return ApprovalResult(
        import_id=import_id,
        customer_id=customer["id"],
        customer_reason=reason,
        order_id=order["id"],
        item_count=len(items),
    )


def ignore_import(store: StagingStore, import_id: int, confirm: bool = False):
    if not confirm:
        raise ConfirmationRequired("ignoring an import must be confirmed")
    row = store.set_status(import_id, ImportStatus.IGNORED)
    IMPORTS_REVIEWED.labels(outcome="ignored").inc()
    return row
