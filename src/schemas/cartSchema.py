from datetime import datetime
from typing import Optional, List
from beanie import PydanticObjectId
from pydantic import BaseModel, Field, ConfigDict

from src.config.settings import settings


# ============= CART SCHEMAS =============
class CartItemSchema(BaseModel):
    """Schema for cart item"""
    class_id: str
    class_name: str
    price: float
    quantity: int = Field(..., gt=0)


class CartAddItemRequest(BaseModel):
    """Request schema for adding to cart, accepts the camelCase keys the frontend sends"""
    # Optional so that a missing classId is answered with 400, not 422
    class_id: Optional[str] = Field(None, alias="classId")
    user_id: str = Field(default=settings.DEFAULT_CART_USER, alias="userId", min_length=1)

    model_config = ConfigDict(populate_by_name=True)


class CartRead(BaseModel):
    """Schema for reading cart"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    user_id: str
    items: List[CartItemSchema]
    total_items: int
    total_price: float
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )


class CartAddItemResponse(BaseModel):
    message: str
    cart: CartRead


class CartDeleteResponse(BaseModel):
    acknowledged: bool = True
    deleted_count: int
