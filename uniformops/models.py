from sqlalchemy import (
    Column, Integer, String, Date, DateTime, ForeignKey, Numeric, Text, JSON
)
from sqlalchemy.orm import relationship, Mapped, mapped_column
from datetime import date, datetime
import enum
from .db import Base
from .util import now_utc

class PaymentStatus(str, enum.Enum):
    PENDING = "Pending"
    PARTIAL = "Partial"
    PAID_IN_FULL = "PaidInFull"

    @property
    def rank(self) -> int:
        return _PAYMENT_RANK[self]

    def upgrade(self, other: "PaymentStatus") -> "PaymentStatus":
        """Return the stronger of the two statuses; never moves backwards."""
        return other if other.rank > self.rank else self

_PAYMENT_RANK = {
    PaymentStatus.PENDING: 0,
    PaymentStatus.PARTIAL: 1,
    PaymentStatus.PAID_IN_FULL: 2,
}

class ImportStatus(str, enum.Enum):
    PENDING = "pending"
    APPROVED = "approved"
    IGNORED = "ignored"

class DeliveryStatus(str, enum.Enum):
    PENDING = "pending"
    PARTIAL = "partial"
    DELIVERED = "delivered"

class ProfileRole(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"

class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    email: Mapped[str] = mapped_column(String(255), unique=True)
    full_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(16), default=ProfileRole.EMPLOYEE.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)

class Customer(Base):
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True, index=True)
    school: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)

    orders: Mapped[list["Order"]] = relationship("Order", back_populates="customer")

class Order(Base):
    __tablename__ = "orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    customer_id: Mapped[int] = mapped_column(Integer, ForeignKey("customers.id"), index=True)
    school: Mapped[str | None] = mapped_column(String(100), nullable=True, index=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    due_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    payment_status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    delivery_status: Mapped[str] = mapped_column(String(16), default=DeliveryStatus.PENDING.value, index=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int | None] = mapped_column(Integer, ForeignKey("profiles.id", ondelete="SET NULL"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc, index=True)

    # Money is never inferred from imported text; both start at zero
    total_amount: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    amount_paid: Mapped[float] = mapped_column(Numeric(12, 2), default=0)

    customer: Mapped["Customer"] = relationship("Customer", back_populates="orders")
    items: Mapped[list["OrderItem"]] = relationship("OrderItem", back_populates="order", cascade="all, delete-orphan")

class OrderItem(Base):
    __tablename__ = "order_items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    order_id: Mapped[int] = mapped_column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), index=True)
    product_name: Mapped[str] = mapped_column(String(200))
    size: Mapped[str] = mapped_column(String(32))
    quantity: Mapped[int] = mapped_column(Integer, default=1)
    unit_price: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    quantity_delivered: Mapped[int] = mapped_column(Integer, default=0)

    order: Mapped["Order"] = relationship("Order", back_populates="items")

class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(200), index=True)
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    school: Mapped[str | None] = mapped_column(String(100), nullable=True)
    price: Mapped[float] = mapped_column(Numeric(12, 2), default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc)

class ImportedOrder(Base):
    """Staging row produced by the text parser, waiting for human review."""
    __tablename__ = "imported_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=now_utc, index=True)
    raw_header: Mapped[str | None] = mapped_column(Text, nullable=True)
    customer_name: Mapped[str] = mapped_column(String(200))
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    school: Mapped[str] = mapped_column(String(100))
    payment_status: Mapped[str] = mapped_column(String(32), default=PaymentStatus.PENDING.value)
    original_text: Mapped[str] = mapped_column(Text, default="")
    raw_items: Mapped[list] = mapped_column(JSON, default=list)
    parsed_items: Mapped[list] = mapped_column(JSON, default=list)
    status: Mapped[str] = mapped_column(String(16), default=ImportStatus.PENDING.value, index=True)
