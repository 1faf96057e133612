from datetime import datetime
from typing import Optional, List
from beanie import Document, PydanticObjectId
from pydantic import BaseModel, Field, ConfigDict
from pymongo import ASCENDING, IndexModel


class CartItem(BaseModel):
    """Class held in a cart, with name and price captured at first add"""
    class_id: str  # Weak reference to YogaClass._id
    class_name: str
    price: float
    quantity: int = Field(1, gt=0)


class Cart(Document):
    """Shopping cart, one per user identifier"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    user_id: str  # "guest" when unauthenticated
    items: List[CartItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "cart"
        indexes = [
            IndexModel([("user_id", ASCENDING)], unique=True),  # One cart per user
        ]

    model_config = ConfigDict(populate_by_name=True)

    @property
    def total_items(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_price(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items), 2)
