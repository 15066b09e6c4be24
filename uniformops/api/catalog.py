from fastapi import APIRouter, Depends, HTTPException, Response
from typing import List, Optional

from ..backend import Backend
from ..config import Settings, get_settings
from ..db import get_backend
from ..schemas import CustomerCreate, CustomerOut, ProductCreate, ProductOut, ProductUpdate
from ..util import norm_phone

router = APIRouter(tags=["catalog"])

@router.get("/customers", response_model=List[CustomerOut])
def list_customers(q: Optional[str] = None, backend: Backend = Depends(get_backend)):
    contains = {"name": q, "phone": q} if q else None
    return backend.select("customers", contains=contains, order_by=("name", "id"))

@router.post("/customers", response_model=CustomerOut, status_code=201)
def create_customer(data: CustomerCreate, backend: Backend = Depends(get_backend),
                    settings: Settings = Depends(get_settings)):
    if not data.name.strip():
        raise HTTPException(422, "Customer name is required")
    # stored the way the parser stores phones so reconciliation can find it
    phone = norm_phone(data.phone, settings.default_area_code) or None
    row = {"name": data.name.strip(), "phone": phone, "school": data.school}
    return backend.insert("customers", [row])[0]

@router.get("/customers/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, backend: Backend = Depends(get_backend)):
    customer = backend.get("customers", customer_id)
    if not customer:
        raise HTTPException(404, "Customer not found")
    return customer

@router.get("/products", response_model=List[ProductOut])
def list_products(school: Optional[str] = None, backend: Backend = Depends(get_backend)):
    eq = {"school": school} if school else None
    return backend.select("products", eq=eq, order_by=("name", "id"))

@router.post("/products", response_model=ProductOut, status_code=201)
def create_product(data: ProductCreate, backend: Backend = Depends(get_backend)):
    return backend.insert("products", [data.model_dump()])[0]

@router.put("/products/{product_id}", response_model=ProductOut)
def update_product(product_id: int, data: ProductUpdate, backend: Backend = Depends(get_backend)):
    if not backend.update("products", data.model_dump(), eq={"id": product_id}):
        raise HTTPException(404, "Product not found")
    return backend.get("products", product_id)

@router.delete("/products/{product_id}", status_code=204)
def delete_product(product_id: int, backend: Backend = Depends(get_backend)):
    if not backend.delete("products", eq={"id": product_id}):
        raise HTTPException(404, "Product not found")
    return Response(status_code=204)
