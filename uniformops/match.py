import logging
from typing import Optional, Tuple

from .backend import Backend, Row
from .metrics import CUSTOMER_RESOLVED
from .util import digits_only

logger = logging.getLogger(__name__)

def match_customer(backend: Backend, name: Optional[str], phone: Optional[str]) -> Tuple[Optional[Row], Optional[str]]:
    """Existing customer for a staged identity: phone first, then name."""
    phone_digits = digits_only(phone)
    if len(phone_digits) > 8:
        rows = backend.select("customers", eq={"phone": phone_digits}, order_by=("id",), limit=1)
        if rows:
            return rows[0], "phone"
    if name:
        rows = backend.select("customers", ieq={"name": name.strip()}, order_by=("id",), limit=1)
        if rows:
            return rows[0], "name"
    return None, None

def resolve_customer(backend: Backend, name: str, phone: Optional[str], school: Optional[str]) -> Tuple[Row, str]:
    customer, reason = match_customer(backend, name, phone)
    if customer is None:
        customer = backend.insert("customers", [{
            "name": name.strip(),
            "phone": digits_only(phone) or None,
            "school": school,
        }])[0]
        reason = "created"
    CUSTOMER_RESOLVED.labels(reason=reason).inc()
    logger.info("Customer %s resolved by %s", customer["id"], reason)
    return customer, reason
