from datetime import datetime
from typing import Optional, List
from beanie import PydanticObjectId
from pydantic import BaseModel, Field, ConfigDict

from src.commonUtils.enumUtils import ClassStatus


# ============= CLASS SCHEMAS =============
class ClassCreate(BaseModel):
    """Schema for creating a class (instructor facing)"""
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    instructor_email: str = Field(..., alias="instructorEmail", min_length=1)
    instructor_name: Optional[str] = Field(None, alias="instructorName")
    image: Optional[str] = None
    description: Optional[str] = None
    available_seats: Optional[int] = Field(None, alias="availableSeats", ge=0)

    model_config = ConfigDict(populate_by_name=True)


class ClassRead(BaseModel):
    """Schema for reading a class"""
    id: PydanticObjectId = Field(..., alias="_id")
    name: str
    price: float
    instructor_email: str
    instructor_name: Optional[str] = None
    image: Optional[str] = None
    description: Optional[str] = None
    available_seats: Optional[int] = None
    status: ClassStatus
    reason: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(
        populate_by_name=True,
        from_attributes=True,
    )


class ClassBulkCreateResponse(BaseModel):
    acknowledged: bool = True
    inserted_count: int
    inserted_ids: List[str]


class ClassStatusUpdateRequest(BaseModel):
    """Admin decision on a class; reason is stored as given"""
    status: ClassStatus
    reason: Optional[str] = None


class ClassStatusUpdateResponse(BaseModel):
    message: str
    matched_count: int
    modified_count: int
