from fastapi import APIRouter
from typing import List, Optional

from src.schemas.classSchema import ClassCreate, ClassRead, ClassBulkCreateResponse
from src.crud.classService import ClassService

router = APIRouter()


# ============= CLASS ROUTES =============
@router.post("/new-class", response_model=ClassBulkCreateResponse, tags=["classes"])
async def create_classes(classes_data: List[ClassCreate]):
    """Create one or more classes in a single batch (instructors)"""
    return await ClassService.bulk_create(classes_data)


@router.get("/classes", response_model=List[ClassRead], tags=["classes"])
async def list_classes(instructorEmail: Optional[str] = None):
    """Get all classes, or only those of one instructor"""
    return await ClassService.list_classes(instructorEmail)


@router.get("/classes/{class_id}", response_model=ClassRead, tags=["classes"])
async def get_class(class_id: str):
    """Get a specific class"""
    return await ClassService.get_class(class_id)


@router.get("/approved-classes", response_model=List[ClassRead], tags=["classes"])
async def list_approved_classes():
    """Get classes approved by an admin, 404 when there are none"""
    return await ClassService.list_approved()
