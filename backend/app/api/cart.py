"""
Cart API Endpoints

The cart is found from the optional bearer token (user cart) and the
X-Cart-Session header (anonymous cart). A session ID is minted when the
client sends none and returned in the same header.

Author: TM3
Date: 2025-10-17
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from app.api.deps import get_cart_service, get_cart_session
from app.core.auth import TokenUser, get_current_user_optional
from app.domain.cart import AddCartItem, ReplaceCart, UpdateCartItem
from app.services.cart_service import (
    CartService,
    CartItemNotFoundError,
    OutOfStockError,
    ProductNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _cart_response(cart, session_id: str) -> dict:
    return {
        "status": "success",
        "session_id": session_id,
        "data": cart.to_dict()
    }


@router.get("/")
async def get_cart(
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service)
):
    """Current cart (user cart when authenticated, merged with the session cart)"""
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        return _cart_response(cart, session_id)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error loading cart: {str(e)}")


@router.put("/")
async def replace_cart(
    body: ReplaceCart,
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service)
):
    """Store the client's cart snapshot, clamped to stock"""
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        cart = cart_service.replace_items(cart, body.items)
        return _cart_response(cart, session_id)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving cart: {str(e)}")


@router.delete("/")
async def clear_cart(
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service)
):
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        cart = cart_service.clear(cart)
        return _cart_response(cart, session_id)

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error clearing cart: {str(e)}")


@router.post("/items")
async def add_cart_item(
    body: AddCartItem,
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service)
):
    """
    Add one unit of a product

    Returns 409 when the cart already holds all available stock.
    """
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        cart = cart_service.add_item(cart, body.product_id)
        return _cart_response(cart, session_id)

    except ProductNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OutOfStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error adding to cart: {str(e)}")


@router.patch("/items/{product_id}")
async def update_cart_item(
    product_id: str,
    body: UpdateCartItem,
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service)
):
    """Set a line's quantity (clamped to stock, 0 removes the line)"""
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        cart = cart_service.update_quantity(cart, product_id, body.quantity)
        return _cart_response(cart, session_id)

    except (ProductNotFoundError, CartItemNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating cart: {str(e)}")


@router.delete("/items/{product_id}")
async def remove_cart_item(
    product_id: str,
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service)
):
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        cart = cart_service.remove_item(cart, product_id)
        return _cart_response(cart, session_id)

    except CartItemNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error removing from cart: {str(e)}")
