import logging
from datetime import datetime
from typing import List
from pymongo.errors import DuplicateKeyError, PyMongoError

from src.commonUtils.errorUtils import NotFoundError, PersistenceError, ValidationError
from src.config.settings import settings
from src.crud.classService import ClassService, parse_class_id
from src.models.cartModel import Cart, CartItem
from src.models.classModel import YogaClass

logger = logging.getLogger(__name__)


class CartService:
    """
    Service layer for cart operations.

    Carts embed their items. Every mutation is a single conditional update
    on the cart document, so concurrent requests for the same user cannot
    overwrite each other's items.
    """

    @staticmethod
    async def ensure_cart(user_id: str) -> None:
        """Create an empty cart for the user if none exists yet"""
        now = datetime.utcnow()
        try:
            await Cart.get_motor_collection().update_one(
                {"user_id": user_id},
                {"$setOnInsert": {"items": [], "created_at": now, "updated_at": now}},
                upsert=True,
            )
        except DuplicateKeyError:
            # A concurrent request created the cart first
            pass

    @staticmethod
    async def increment_item(user_id: str, class_id: str) -> bool:
        result = await Cart.get_motor_collection().update_one(
            {"user_id": user_id, "items.class_id": class_id},
            {
                "$inc": {"items.$.quantity": 1},
                "$set": {"updated_at": datetime.utcnow()},
            },
        )
        return result.matched_count > 0

    @staticmethod
    async def push_item(user_id: str, item: CartItem) -> bool:
        result = await Cart.get_motor_collection().update_one(
            {"user_id": user_id, "items.class_id": {"$ne": item.class_id}},
            {
                "$push": {"items": item.model_dump()},
                "$set": {"updated_at": datetime.utcnow()},
            },
        )
        return result.matched_count > 0

    @staticmethod
    async def add_item(user_id: str, class_id: str) -> Cart:
        """Add a class to the user's cart or increase its quantity if already there"""
        if not class_id or not class_id.strip():
            raise ValidationError("ClassId is required.")

        # Referential check first, so an unknown class never creates a cart
        yoga_class = await ClassService.get_class(class_id)
        class_id = str(yoga_class.id)

        # Name and price are captured once; later adds only bump the quantity
        snapshot = CartItem(
            class_id=class_id,
            class_name=yoga_class.name,
            price=yoga_class.price,
            quantity=1,
        )

        try:
            await CartService.ensure_cart(user_id)

            for _ in range(settings.CART_WRITE_ATTEMPTS):
                if await CartService.increment_item(user_id, class_id):
                    logger.info(f"Incremented class {class_id} in cart of {user_id}")
                    break
                if await CartService.push_item(user_id, snapshot):
                    logger.info(f"Added class {class_id} to cart of {user_id}")
                    break
            else:
                raise PersistenceError(
                    "Error adding class to cart",
                    detail=f"Cart of {user_id} kept changing during update",
                )

            cart = await Cart.find_one(Cart.user_id == user_id)
        except PyMongoError as e:
            logger.error(f"Error adding class to cart: {e}")
            raise PersistenceError("Error adding class to cart", detail=str(e)) from e

        if cart is None:
            logger.error(f"Cart of {user_id} vanished after adding class {class_id}")
            raise PersistenceError(
                "Error adding class to cart",
                detail=f"Cart of {user_id} was removed during update",
            )

        return cart

    @staticmethod
    async def remove_item(class_id: str, user_id: str = settings.DEFAULT_CART_USER) -> dict:
        """Remove the entry for a class from the user's cart entirely"""
        try:
            result = await Cart.get_motor_collection().update_one(
                {"user_id": user_id, "items.class_id": class_id},
                {
                    "$pull": {"items": {"class_id": class_id}},
                    "$set": {"updated_at": datetime.utcnow()},
                },
            )
        except PyMongoError as e:
            logger.error(f"Error deleting cart item: {e}")
            raise PersistenceError("Error deleting cart item", detail=str(e)) from e

        return {"acknowledged": result.acknowledged, "deleted_count": result.modified_count}

    @staticmethod
    async def get_cart(user_id: str) -> Cart:
        try:
            cart = await Cart.find_one(Cart.user_id == user_id)
        except PyMongoError as e:
            raise PersistenceError("Error retrieving cart", detail=str(e)) from e

        if not cart:
            logger.warning(f"Cart not found for {user_id}")
            raise NotFoundError("Cart not found for this user.")

        return cart

    @staticmethod
    async def get_cart_classes_by_email(email: str) -> List[YogaClass]:
        """Get the catalog records of every class in the carts held under an email"""
        try:
            carts = await Cart.find({"user_id": email}).to_list()

            class_ids = [parse_class_id(item.class_id) for cart in carts for item in cart.items]
            class_ids = [class_id for class_id in class_ids if class_id is not None]
            if not class_ids:
                return []

            return await YogaClass.find({"_id": {"$in": class_ids}}).to_list()
        except PyMongoError as e:
            raise PersistenceError("Error retrieving cart classes", detail=str(e)) from e

    @staticmethod
    def to_cart_read(cart: Cart) -> dict:
        """Cart with totals computed from the captured prices"""
        return {
            "_id": cart.id,
            "user_id": cart.user_id,
            "items": [item.model_dump() for item in cart.items],
            "total_items": cart.total_items,
            "total_price": cart.total_price,
            "created_at": cart.created_at,
            "updated_at": cart.updated_at,
        }
