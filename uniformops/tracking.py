import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from .backend import Backend, Row
from .errors import InvalidInput, OrderNotFound
from .models import DeliveryStatus, PaymentStatus
from .schemas import OrderIn

logger = logging.getLogger(__name__)

def delivery_status_for(items: Iterable[Row]) -> DeliveryStatus:
    items = list(items)
    delivered = sum(int(i.get("quantity_delivered") or 0) for i in items)
    total = sum(int(i.get("quantity") or 0) for i in items)
    if delivered == 0:
        return DeliveryStatus.PENDING
    if delivered >= total:
        return DeliveryStatus.DELIVERED
    return DeliveryStatus.PARTIAL

def _order(backend: Backend, order_id: int) -> Row:
    order = backend.get("orders", order_id)
    if order is None:
        raise OrderNotFound(order_id)
    return order

def record_payment(backend: Backend, order_id: int, amount: float) -> Row:
    """Add ``amount`` to what the customer has paid and refresh the payment label."""
    if amount is None or amount <= 0:
        raise InvalidInput("payment amount must be greater than zero")
    order = _order(backend, order_id)
    total = float(order.get("total_amount") or 0)
    paid = float(order.get("amount_paid") or 0) + float(amount)
    status = payment_status_for(total, paid)
    backend.update("orders", {"amount_paid": paid, "payment_status": status.value}, eq={"id": order_id})
    logger.info("Order %s received %.2f (paid %.2f of %.2f)", order_id, amount, paid, total)
    return _order(backend, order_id)

def update_deliveries(backend: Backend, order_id: int, delivered: Dict[int, int]) -> List[Row]:
    """Set ``quantity_delivered`` per item and derive the order's delivery status."""
    _order(backend, order_id)
    items = {i["id"]: i for i in backend.select("order_items", eq={"order_id": order_id}, order_by=("id",))}
    for item_id, qty in delivered.items():
        if item_id not in items:
            raise InvalidInput(f"item {item_id} does not belong to order {order_id}")
        if qty < 0 or qty > int(items[item_id]["quantity"]):
            raise InvalidInput(f"delivered quantity for item {item_id} must be between 0 and {items[item_id]['quantity']}")

    for item_id, qty in delivered.items():
        backend.update("order_items", {"quantity_delivered": qty}, eq={"id": item_id})
        items[item_id]["quantity_delivered"] = qty

    status = delivery_status_for(items.values())
    backend.update("orders", {"delivery_status": status.value}, eq={"id": order_id})
    logger.info("Order %s delivery status is now %s", order_id, status.value)
    return list(items.values())

def payment_status_for(total: float, paid: float) -> PaymentStatus:
    if paid >= total:
        return PaymentStatus.PAID_IN_FULL
    return PaymentStatus.PARTIAL if paid > 0 else PaymentStatus.PENDING

def save_order(backend: Backend, data: OrderIn, order_id: Optional[int] = None,
               today: Optional[date] = None) -> Row:
    """Create an order, or rewrite ``order_id``, from a manually entered form.

    Items are replaced wholesale; their ``quantity_delivered`` comes from the
    form so deliveries recorded earlier survive an edit.
    """
    if data.customer_id is None:
        raise InvalidInput("a customer must be selected")
    for line in data.items:
        if line.quantity_delivered > line.quantity:
            raise InvalidInput(f"delivered quantity for {line.product_name} exceeds {line.quantity}")

    if order_id is not None:
        _order(backend, order_id)
    if backend.get("customers", data.customer_id) is None:
        raise InvalidInput(f"customer {data.customer_id} does not exist")

    total = round(sum(line.unit_price * line.quantity for line in data.items), 2)
    items = [line.model_dump() for line in data.items]
    fields = {
        "customer_id": data.customer_id,
        "school": data.school,
        "purchase_date": data.purchase_date or today or date.today(),
        "due_date": data.due_date,
        "notes": data.notes,
        "total_amount": total,
        "amount_paid": data.amount_paid,
        "payment_status": payment_status_for(total, data.amount_paid).value,
        "delivery_status": delivery_status_for(items).value,
    }

    if order_id is None:
        order_id = backend.insert("orders", [fields])[0]["id"]
    else:
        backend.update("orders", fields, eq={"id": order_id})
        backend.delete("order_items", eq={"order_id": order_id})
    if items:
        backend.insert("order_items", [{**it, "order_id": order_id} for it in items])
    logger.info("Order %s saved with %s items (total %.2f)", order_id, len(items), total)
    return _order(backend, order_id)
