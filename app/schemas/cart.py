from pydantic import BaseModel, Field
from decimal import Decimal
from typing import List, Optional

from app.services.cart import CartStore


class CartItemAdd(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int = 1


class CartItemUpdate(BaseModel):
    product_id: str = Field(min_length=1)
    quantity: int


class CartItemResponse(BaseModel):
    product_id: str
    title: str
    vendor_name: str
    unit_price: Decimal
    quantity: int
    image_url: Optional[str] = None
    subtotal: Decimal

    class Config:
        from_attributes = True


class CartResponse(BaseModel):
    items: List[CartItemResponse]
    total_items: int
    total_price: Decimal
    is_open: bool

    @classmethod
    def from_store(cls, store: CartStore) -> "CartResponse":
        snapshot = store.snapshot()
        return cls(
            items=[CartItemResponse.model_validate(item) for item in snapshot.items],
            total_items=snapshot.total_items,
            total_price=snapshot.total_price,
            is_open=snapshot.is_open,
        )
