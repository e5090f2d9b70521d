from pydantic import AliasChoices, BaseModel, Field
from typing import List
from decimal import Decimal
from datetime import datetime

# range of the Integer columns ids and quantities are stored in
MAX_INT = 2**31 - 1

class LineItem(BaseModel):
    product_id: int = Field(
        strict=True, gt=0, le=MAX_INT,
        validation_alias=AliasChoices('productId', 'product_id', 'id'),
        serialization_alias='productId',
    )
    quantity: int = Field(default=1, strict=True, gt=0, le=MAX_INT, validation_alias=AliasChoices('quantity', 'qty'))
    class Config:
        frozen = True
        populate_by_name = True

class OrderRequest(BaseModel):
    items: List[LineItem]

class OrderPlacedRead(BaseModel):
    order_id: int = Field(serialization_alias='orderId')
    total: Decimal

class ProductRead(BaseModel):
    id: int
    name: str
    unit_price: Decimal = Field(serialization_alias='unitPrice')
    stock: int
    class Config: from_attributes = True

class OrderItemRead(BaseModel):
    product_id: int = Field(serialization_alias='productId')
    quantity: int
    unit_price: Decimal = Field(serialization_alias='unitPrice')
    class Config: from_attributes = True

class OrderRead(BaseModel):
    id: int
    total: Decimal
    created_at: datetime = Field(serialization_alias='createdAt')
    items: List[OrderItemRead] = []
    class Config: from_attributes = True
