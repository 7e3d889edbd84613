"""
WhatsApp API Endpoints
wa.me links for general contact, a single product and the current cart

Author: TM3
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from app.api.deps import (
    get_cart_service,
    get_cart_session,
    get_product_repository,
    get_whatsapp_service,
)
from app.core.auth import TokenUser, get_current_user_optional
from app.repositories.product_repository import ProductRepository
from app.services.cart_service import CartService
from app.services.whatsapp_service import WhatsAppService

router = APIRouter()


@router.get("/contact")
async def get_contact_link(
    message: Optional[str] = Query(None, description="Overrides the default message"),
    service: WhatsAppService = Depends(get_whatsapp_service)
):
    try:
        return {
            "status": "success",
            "url": service.contact_link(message)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error building WhatsApp link: {str(e)}")


@router.get("/product/{product_id}")
async def get_product_link(
    product_id: str,
    service: WhatsAppService = Depends(get_whatsapp_service),
    product_repo: ProductRepository = Depends(get_product_repository)
):
    try:
        product = product_repo.find_by_id(product_id)

        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        return {
            "status": "success",
            "url": service.product_link(product)
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error building WhatsApp link: {str(e)}")


@router.get("/cart")
async def get_cart_link(
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    service: WhatsAppService = Depends(get_whatsapp_service),
    cart_service: CartService = Depends(get_cart_service)
):
    """Order summary of the current cart as a WhatsApp message"""
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        return {
            "status": "success",
            "url": service.cart_link(cart)
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error building WhatsApp link: {str(e)}")
