import logging
from typing import List, Optional
from beanie import PydanticObjectId
from bson import ObjectId
from bson.errors import InvalidId
from pymongo.errors import PyMongoError

from src.commonUtils.enumUtils import ClassStatus
from src.commonUtils.errorUtils import NotFoundError, PersistenceError, ValidationError
from src.models.classModel import YogaClass
from src.schemas.classSchema import ClassCreate

logger = logging.getLogger(__name__)


def parse_class_id(class_id: str) -> Optional[PydanticObjectId]:
    """Return the ObjectId for a class id string, or None if it cannot be one"""
    try:
        return PydanticObjectId(ObjectId(class_id))
    except (InvalidId, TypeError):
        return None


class ClassService:
    """Service layer for the class catalog"""

    @staticmethod
    async def bulk_create(classes_data: List[ClassCreate]) -> dict:
        """Insert a batch of classes, all starting as Pending"""
        if not classes_data:
            raise ValidationError("At least one class is required.")

        classes = [YogaClass(**class_data.model_dump()) for class_data in classes_data]

        try:
            result = await YogaClass.insert_many(classes)
        except PyMongoError as e:
            logger.error(f"Error inserting classes: {e}")
            raise PersistenceError("Error inserting classes", detail=str(e)) from e

        inserted_ids = [str(inserted_id) for inserted_id in result.inserted_ids]
        logger.info(f"Inserted {len(inserted_ids)} classes")
        return {
            "acknowledged": result.acknowledged,
            "inserted_count": len(inserted_ids),
            "inserted_ids": inserted_ids,
        }

    @staticmethod
    async def list_classes(instructor_email: Optional[str] = None) -> List[YogaClass]:
        """Get all classes, or only the ones owned by an instructor"""
        query = {}

        if instructor_email:
            query["instructor_email"] = instructor_email

        try:
            return await YogaClass.find(query).to_list()
        except PyMongoError as e:
            raise PersistenceError("Error retrieving classes", detail=str(e)) from e

    @staticmethod
    async def list_approved() -> List[YogaClass]:
        try:
            classes = await YogaClass.find({"status": ClassStatus.ACTIVE.value}).to_list()
        except PyMongoError as e:
            raise PersistenceError("Error retrieving approved classes", detail=str(e)) from e

        if not classes:
            raise NotFoundError("No approved classes found.")

        return classes

    @staticmethod
    async def get_class(class_id: str) -> YogaClass:
        object_id = parse_class_id(class_id)
        yoga_class = await YogaClass.get(object_id) if object_id else None

        if not yoga_class:
            logger.warning(f"Class {class_id} not found")
            raise NotFoundError("Class not found.")

        return yoga_class

    @staticmethod
    async def set_status(class_id: str, status: ClassStatus, reason: Optional[str] = None) -> dict:
        """
        Overwrite status and reason of a class in place.

        Any transition is allowed and the reason is stored even when the
        class becomes Active. No document is created for an unknown id.
        """
        object_id = parse_class_id(class_id)
        if object_id is None:
            raise NotFoundError("Class not found")

        try:
            result = await YogaClass.get_motor_collection().update_one(
                {"_id": object_id},
                {"$set": {"status": ClassStatus(status).value, "reason": reason}},
                upsert=False,
            )
        except PyMongoError as e:
            logger.error(f"Error updating class status: {e}")
            raise PersistenceError("Error updating status", detail=str(e)) from e

        if result.matched_count == 0:
            raise NotFoundError("Class not found")

        logger.info(f"Class {class_id} status set to {ClassStatus(status).value}")
        return {
            "message": "Class status updated successfully",
            "matched_count": result.matched_count,
            "modified_count": result.modified_count,
        }
