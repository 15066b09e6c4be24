from datetime import date, timedelta
from typing import Optional

from .backend import Backend
from .parsing.rules import UNKNOWN_CUSTOMER
from .schemas import DashboardOrder, DashboardSummary

UPCOMING_DAYS = 7


def summarize(backend: Backend, school: Optional[str] = None, q: Optional[str] = None,
              today: Optional[date] = None) -> DashboardSummary:
    """Money totals over every order plus the orders still owing or overdue.

    The totals ignore the filters; ``school`` and ``q`` (customer name) only
    narrow the order lists.
    """
    today = today or date.today()
    orders = backend.select("orders", order_by=("-created_at", "-id"))
    names = {c["id"]: c["name"] for c in backend.select("customers")}

    revenue = received = 0.0
    owing = []
    for o in orders:
        total = float(o.get("total_amount") or 0)
        paid = float(o.get("amount_paid") or 0)
        revenue += total
        received += paid
        due = o.get("due_date")
        if total - paid > 0 or (due is not None and due < today):
            owing.append(DashboardOrder(
                id=o["id"],
                customer_name=names.get(o["customer_id"], UNKNOWN_CUSTOMER),
                school=o.get("school"),
                total=total,
                paid=paid,
                pending=total - paid,
                purchase_date=o.get("purchase_date"),
                due_date=due,
            ))

    if school:
        owing = [o for o in owing if o.school == school]
    if q:
        owing = [o for o in owing if q.lower() in o.customer_name.lower()]

    horizon = today + timedelta(days=UPCOMING_DAYS)
    return DashboardSummary(
        total_revenue=revenue,
        total_received=received,
        total_pending=revenue - received,
        pending_orders=owing,
        late_orders=[o for o in owing if o.due_date is not None and o.due_date < today],
        upcoming_orders=[o for o in owing if o.due_date is not None and today <= o.due_date <= horizon],
    )
