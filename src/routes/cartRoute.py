from fastapi import APIRouter, Query
from typing import List

from src.config.settings import settings
from src.schemas.cartSchema import CartRead, CartAddItemRequest, CartAddItemResponse, CartDeleteResponse
from src.schemas.classSchema import ClassRead
from src.crud.cartService import CartService

router = APIRouter()


# ============= CART ROUTES =============
@router.post("/add-to-cart", response_model=CartAddItemResponse, tags=["cart"])
async def add_to_cart(item: CartAddItemRequest):
    """Add a class to the cart, or bump its quantity if it is already there"""
    cart = await CartService.add_item(item.user_id, item.class_id)
    return {
        "message": "Class added to cart successfully!",
        "cart": CartService.to_cart_read(cart),
    }


@router.get("/get-cart/{user_id}", response_model=CartRead, tags=["cart"])
async def get_cart(user_id: str):
    """Get a user's cart"""
    cart = await CartService.get_cart(user_id)
    return CartService.to_cart_read(cart)


@router.get("/cart/{email}", response_model=List[ClassRead], tags=["cart"])
async def get_cart_classes(email: str):
    """Get the full class records of everything in the cart held under an email"""
    return await CartService.get_cart_classes_by_email(email)


@router.delete("/delete-cart-item/{class_id}", response_model=CartDeleteResponse, tags=["cart"])
async def delete_cart_item(class_id: str, userId: str = Query(default=settings.DEFAULT_CART_USER)):
    """Remove a class from the cart"""
    return await CartService.remove_item(class_id, userId)
