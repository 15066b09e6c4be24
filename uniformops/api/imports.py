from fastapi import APIRouter, Body, Depends
from typing import List, Optional

from ..backend import Backend
from ..config import Settings, get_settings
from ..db import get_backend
from ..metrics import ORDERS_PARSED, PARSE_LATENCY
from ..parsing import parse_orders
from ..products import suggest_product
from ..review import approve_import, edit_import, ignore_import
from ..schemas import (
    ApprovalResult, ApproveRequest, IgnoreRequest, ImportEdit, ImportedOrderOut, ParseResult,
)
from ..staging import StagingStore
from .deps import get_store

router = APIRouter(prefix="/imports", tags=["imports"])

def _out(row, catalog=None) -> ImportedOrderOut:
    out = ImportedOrderOut.model_validate(row)
    if catalog:
        out.suggestions = [suggest_product(it.product, catalog, school=out.school) for it in out.parsed_items]
    return out

@router.post("/parse", response_model=ParseResult)
def parse_import(text: str = Body(..., media_type="text/plain"), stage: bool = True,
                 store: StagingStore = Depends(get_store), settings: Settings = Depends(get_settings)):
    with PARSE_LATENCY.time():
        orders = parse_orders(text, area_code=settings.default_area_code, fallback_school=settings.fallback_school)
    ORDERS_PARSED.inc(len(orders))
    staged_ids = [row["id"] for row in store.insert_batch(orders)] if stage else []
    return ParseResult(count=len(orders), staged_ids=staged_ids, orders=orders)

@router.get("", response_model=List[ImportedOrderOut])
def list_imports(store: StagingStore = Depends(get_store), backend: Backend = Depends(get_backend)):
    catalog = backend.select("products", order_by=("name",))
    return [_out(row, catalog) for row in store.list_pending()]

@router.get("/{import_id}", response_model=ImportedOrderOut)
def get_import(import_id: int, store: StagingStore = Depends(get_store), backend: Backend = Depends(get_backend)):
    catalog = backend.select("products", order_by=("name",))
    return _out(store.get(import_id), catalog)

@router.patch("/{import_id}", response_model=ImportedOrderOut)
def patch_import(import_id: int, edits: ImportEdit, store: StagingStore = Depends(get_store)):
    return _out(edit_import(store, import_id, edits))

@router.post("/{import_id}/approve", response_model=ApprovalResult)
def approve(import_id: int, body: Optional[ApproveRequest] = None,
            store: StagingStore = Depends(get_store)):
    body = body or ApproveRequest()
    return approve_import(store, import_id, edits=body.edits, created_by=body.created_by)

@router.post("/{import_id}/ignore", response_model=ImportedOrderOut)
def ignore(import_id: int, body: IgnoreRequest, store: StagingStore = Depends(get_store)):
    return _out(ignore_import(store, import_id, confirm=body.confirm))
