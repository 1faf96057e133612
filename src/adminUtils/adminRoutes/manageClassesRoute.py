from fastapi import APIRouter
from typing import List

from src.schemas.classSchema import ClassRead, ClassStatusUpdateRequest, ClassStatusUpdateResponse
from src.crud.classService import ClassService

router = APIRouter()


@router.get("/classes-manage", response_model=List[ClassRead])
async def list_classes_to_manage():
    """Every class regardless of status, for the admin review screen"""
    return await ClassService.list_classes()


@router.patch("/change-status/{class_id}", response_model=ClassStatusUpdateResponse)
async def change_class_status(class_id: str, update: ClassStatusUpdateRequest):
    """
    Approve or reject a class

    - **class_id**: The ID of the class to update
    - **status**: Pending, Active or Rejected; any other value is answered with 422
    - **reason**: Stored as given, also when approving
    """
    return await ClassService.set_status(class_id, update.status, update.reason)
