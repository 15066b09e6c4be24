from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List, Optional

from ..backend import Backend, Row
from ..db import get_backend
from ..schemas import DeliveryUpdate, OrderIn, OrderItemOut, OrderOut, PaymentCreate
from ..tracking import record_payment, save_order, update_deliveries

router = APIRouter(prefix="/orders", tags=["orders"])

def _attach(backend: Backend, orders: List[Row]) -> List[OrderOut]:
    if not orders:
        return []
    ids = [o["id"] for o in orders]
    customers = {c["id"]: c for c in backend.select("customers", eq={"id": {o["customer_id"] for o in orders}})}
    items: dict = {}
    for it in backend.select("order_items", eq={"order_id": ids}, order_by=("id",)):
        items.setdefault(it["order_id"], []).append(it)
    return [
        OrderOut.model_validate({**o, "customer": customers.get(o["customer_id"]), "items": items.get(o["id"], [])})
        for o in orders
    ]

def _one(backend: Backend, order_id: int) -> OrderOut:
    order = backend.get("orders", order_id)
    if not order:
        raise HTTPException(404, "Order not found")
    return _attach(backend, [order])[0]

@router.get("", response_model=List[OrderOut])
def list_orders(school: Optional[str] = None, q: Optional[str] = None, backend: Backend = Depends(get_backend)):
    eq = {"school": school} if school else None
    out = _attach(backend, backend.select("orders", eq=eq, order_by=("-created_at", "-id"), limit=2000))
    if q:
        needle = q.lower()
        out = [o for o in out if o.customer and (
            needle in o.customer.name.lower() or needle in (o.customer.phone or ""))]
    return out

@router.post("", response_model=OrderOut, status_code=201)
def create_order(data: OrderIn, backend: Backend = Depends(get_backend)):
    order = save_order(backend, data)
    return _attach(backend, [order])[0]

@router.put("/{order_id}", response_model=OrderOut)
def update_order(order_id: int, data: OrderIn, backend: Backend = Depends(get_backend)):
    order = save_order(backend, data, order_id=order_id)
    return _attach(backend, [order])[0]

@router.get("/{order_id}", response_model=OrderOut)
def get_order(order_id: int, backend: Backend = Depends(get_backend)):
    return _one(backend, order_id)

@router.delete("/{order_id}", status_code=204)
def delete_order(order_id: int, backend: Backend = Depends(get_backend)):
    if not backend.delete("orders", eq={"id": order_id}):
        raise HTTPException(404, "Order not found")
    return Response(status_code=204)

@router.post("/{order_id}/payments", response_model=OrderOut)
def add_payment(order_id: int, data: PaymentCreate, backend: Backend = Depends(get_backend)):
    record_payment(backend, order_id, data.amount)
    return _one(backend, order_id)

@router.post("/{order_id}/deliveries", response_model=List[OrderItemOut])
def save_deliveries(order_id: int, data: DeliveryUpdate, backend: Backend = Depends(get_backend)):
    rows = update_deliveries(backend, order_id, {line.item_id: line.quantity_delivered for line in data.items})
    return [OrderItemOut.model_validate(r) for r in rows]
