from datetime import datetime
from typing import Optional
from beanie import Document, PydanticObjectId
from pydantic import Field, ConfigDict

from src.commonUtils.enumUtils import ClassStatus


class YogaClass(Document):
    """Yoga class document in MongoDB"""
    id: Optional[PydanticObjectId] = Field(None, alias="_id")
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)

    instructor_email: str  # Owner reference, the instructor who created the class
    instructor_name: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    available_seats: Optional[int] = Field(None, ge=0)  # Informational only, never enforced

    status: ClassStatus = ClassStatus.PENDING
    reason: Optional[str] = None  # Meaningful only when status is Rejected
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "classes"
        indexes = [
            [("instructor_email", 1)],
            [("status", 1)],
        ]

    model_config = ConfigDict(populate_by_name=True)
