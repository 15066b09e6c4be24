"""Heuristic parser for order lists pasted from messaging apps.

The text is grouped by school header lines; every block under a header is one
customer order. Lines are folded left to right into a single open
``OrderAccumulator`` which is finalized into a ``StagingOrder`` whenever the
next header arrives and at end of input.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models import PaymentStatus
from ..schemas import StagingOrder
from ..util import norm_phone
from .items import parse_item_line
from .rules import (
    DEFAULT_AREA_CODE, DIGIT_RE, FALLBACK_SCHOOL, ITEM_RE, NAME_LABEL_PREFIX_RE, NAME_LABEL_RE,
    NAME_NOISE_RE, PAGO_FRAGMENT_RE, PHONE_LINE_NOISE_RE, PHONE_RE, UNKNOWN_CUSTOMER,
    UNKNOWN_SCHOOL, mentions_paid, payment_status_in, school_for,
)


@dataclass
class OrderAccumulator:
    school: str
    raw_header: Optional[str] = None
    payment_status: PaymentStatus = PaymentStatus.PENDING
    customer_name: str = ""
    phone: str = ""
    items: List[str] = field(default_factory=list)
    raw_lines: List[str] = field(default_factory=list)

    def mark_paid(self) -> None:
        self.payment_status = self.payment_status.upgrade(PaymentStatus.PAID_IN_FULL)


def split_lines(text: str) -> List[str]:
    return [ln.strip() for ln in (text or "").split("\n") if ln.strip()]


def _strip_paid(acc: OrderAccumulator, name: str) -> str:
    if mentions_paid(name):
        acc.mark_paid()
        name = PAGO_FRAGMENT_RE.sub("", name, count=1).strip()
    return name


def _absorb(acc: OrderAccumulator, line: str, area_code: str) -> None:
    mphone = PHONE_RE.search(line)
    if mphone:
        acc.phone = norm_phone(mphone.group(0), area_code)
        rest = (line[:mphone.start()] + line[mphone.end():]).strip()
        rest = PHONE_LINE_NOISE_RE.sub("", rest)
        if len(rest) > 2:
            acc.customer_name = rest.strip()
        if mentions_paid(line):
            acc.mark_paid()
        return

    if NAME_LABEL_RE.match(line):
        name = _strip_paid(acc, NAME_LABEL_PREFIX_RE.sub("", line, count=1).strip())
        if name:
            acc.customer_name = name
        return

    if ITEM_RE.search(line):
        acc.items.append(line)
        return

    if not acc.customer_name and not DIGIT_RE.search(line) and len(line) > 2:
        acc.customer_name = _strip_paid(acc, line)


def open_order(header: str, fallback_school: str = FALLBACK_SCHOOL) -> OrderAccumulator:
    return OrderAccumulator(
        school=school_for(header) or fallback_school,
        raw_header=header,
        payment_status=payment_status_in(header),
    )


def clean_customer_name(name: str) -> str:
    name = PAGO_FRAGMENT_RE.sub("", name or "")
    name = NAME_NOISE_RE.sub("", name).strip()
    if not name:
        return UNKNOWN_CUSTOMER
    return name[0].upper() + name[1:]


def finalize(acc: OrderAccumulator) -> StagingOrder:
    payment_status = acc.payment_status
    if payment_status == PaymentStatus.PENDING:
        payment_status = payment_status_in(" ".join(acc.raw_lines))

    return StagingOrder(
        raw_header=acc.raw_header,
        school=acc.school,
        payment_status=payment_status,
        customer_name=clean_customer_name(acc.customer_name),
        phone=acc.phone,
        items=list(acc.items),
        parsed_items=[parse_item_line(raw) for raw in acc.items],
        raw_lines=list(acc.raw_lines),
    )


def step(acc: Optional[OrderAccumulator], line: str, area_code: str = DEFAULT_AREA_CODE,
         fallback_school: str = FALLBACK_SCHOOL) -> Tuple[OrderAccumulator, Optional[StagingOrder]]:
    """Feed one line; returns the open accumulator and the order it closed, if any."""
    if school_for(line) is not None:
        emitted = finalize(acc) if acc is not None else None
        return open_order(line, fallback_school), emitted

    if acc is None:
        acc = OrderAccumulator(school=UNKNOWN_SCHOOL)
    acc.raw_lines.append(line)
    _absorb(acc, line, area_code)
    return acc, None


def parse_orders(text: str, area_code: str = DEFAULT_AREA_CODE,
                 fallback_school: str = FALLBACK_SCHOOL) -> List[StagingOrder]:
    orders: List[StagingOrder] = []
    acc: Optional[OrderAccumulator] = None
    for line in split_lines(text):
        acc, emitted = step(acc, line, area_code, fallback_school)
        if emitted is not None:
            orders.append(emitted)
    if acc is not None:
        orders.append(finalize(acc))
    return orders
