from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import date, datetime

from .models import ImportStatus, PaymentStatus

class ParsedItem(BaseModel):
    quantity: int = Field(default=1, gt=0)
    product: str = Field(min_length=1)
    size: str = Field(min_length=1)

class StagingOrder(BaseModel):
    raw_header: Optional[str] = None
    school: str
    payment_status: PaymentStatus = PaymentStatus.PENDING
    customer_name: str
    phone: str = ""
    items: List[str] = Field(default_factory=list)
    parsed_items: List[ParsedItem] = Field(default_factory=list)
    raw_lines: List[str] = Field(default_factory=list)
    status: ImportStatus = ImportStatus.PENDING

class ProductSuggestion(BaseModel):
    product_id: Optional[int] = None
    name: Optional[str] = None
    price: Optional[float] = None
    score: float = 0

class ImportedOrderOut(BaseModel):
    id: int
    created_at: datetime
    raw_header: Optional[str]
    customer_name: str
    phone: Optional[str]
    school: str
    payment_status: str
    original_text: str
    raw_items: List[str]
    parsed_items: List[ParsedItem]
    status: str
    suggestions: List[ProductSuggestion] = Field(default_factory=list)

class ImportEdit(BaseModel):
    """Fields a reviewer may correct before approving."""
    school: Optional[str] = None
    customer_name: Optional[str] = None
    phone: Optional[str] = None
    payment_status: Optional[str] = None
    parsed_items: Optional[List[ParsedItem]] = None

    @field_validator("customer_name")
    @classmethod
    def name_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("customer name must not be empty")
        return v.strip() if v is not None else v

    @field_validator("school")
    @classmethod
    def school_not_blank(cls, v):
        if v is not None and not v.strip():
            raise ValueError("school must not be empty")
        return v.strip() if v is not None else v

class ApproveRequest(BaseModel):
    edits: Optional[ImportEdit] = None
    created_by: Optional[int] = None

class IgnoreRequest(BaseModel):
    confirm: bool = False

class ApprovalResult(BaseModel):
    import_id: int
    customer_id: int
    customer_reason: str
    order_id: int
    item_count: int

class ParseResult(BaseModel):
    count: int
    staged_ids: List[int] = Field(default_factory=list)
    orders: List[StagingOrder]

class CustomerCreate(BaseModel):
    name: str = Field(min_length=1)
    phone: Optional[str] = None
    school: Optional[str] = None

class CustomerOut(BaseModel):
    id: int
    name: str
    phone: Optional[str]
    school: Optional[str]
    created_at: datetime

class ProductCreate(BaseModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    school: Optional[str] = None
    price: float = Field(default=0, ge=0)

class ProductOut(BaseModel):
    id: int
    name: str
    category: Optional[str]
    school: Optional[str]
    price: float
    created_at: datetime

class OrderItemOut(BaseModel):
    id: int
    product_name: str
    size: str
    quantity: int
    unit_price: float
    quantity_delivered: int

class OrderOut(BaseModel):
    id: int
    customer_id: int
    customer: Optional[CustomerOut] = None
    school: Optional[str]
    purchase_date: Optional[date]
    due_date: Optional[date]
    payment_status: Optional[str]
    delivery_status: str
    notes: Optional[str]
    created_by: Optional[int]
    created_at: datetime
    total_amount: float
    amount_paid: float
    items: List[OrderItemOut] = Field(default_factory=list)

class PaymentCreate(BaseModel):
    amount: float

class DeliveryLine(BaseModel):
    item_id: int
    quantity_delivered: int = Field(ge=0)

class DeliveryUpdate(BaseModel):
    items: List[DeliveryLine]

class ProductUpdate(ProductCreate):
    pass

class OrderItemIn(BaseModel):
    product_name: str = Field(min_length=1)
    size: str = Field(default="Standard", min_length=1)
    quantity: int = Field(default=1, gt=0)
    unit_price: float = Field(default=0, ge=0)
    quantity_delivered: int = Field(default=0, ge=0)

class OrderIn(BaseModel):
    """Manual order entry; totals are computed from the items."""
    customer_id: Optional[int] = None
    school: Optional[str] = None
    purchase_date: Optional[date] = None
    due_date: Optional[date] = None
    notes: Optional[str] = None
    amount_paid: float = Field(default=0, ge=0)
    items: List[OrderItemIn] = Field(default_factory=list)

class DashboardOrder(BaseModel):
    id: int
    customer_name: str
    school: Optional[str]
    total: float
    paid: float
    pending: float
    purchase_date: Optional[date]
    due_date: Optional[date]

class DashboardSummary(BaseModel):
    total_revenue: float
    total_received: float
    total_pending: float
    pending_orders: List[DashboardOrder] = Field(default_factory=list)
    late_orders: List[DashboardOrder] = Field(default_factory=list)
    upcoming_orders: List[DashboardOrder] = Field(default_factory=list)
