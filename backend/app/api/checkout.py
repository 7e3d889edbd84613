"""
Checkout API Endpoint
Turns the current cart into an order and runs the (simulated) Pagadito payment

Author: TM3
Date: 2025-10-17
"""
import logging
from fastapi import APIRouter, Depends, HTTPException
from typing import Optional

from app.api.deps import get_cart_service, get_cart_session, get_checkout_service
from app.core.auth import TokenUser, get_current_user_optional
from app.connectors.pagadito_connector import PagaditoError
from app.domain.order import CheckoutRequest
from app.services.cart_service import CartService, EmptyCartError, OutOfStockError
from app.services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/")
async def checkout(
    body: CheckoutRequest,
    session_id: str = Depends(get_cart_session),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
    cart_service: CartService = Depends(get_cart_service),
    checkout_service: CheckoutService = Depends(get_checkout_service)
):
    """
    Place an order for the current cart

    Returns:
        success flag, order, payment_id, payment_url and error message
    """
    try:
        cart = cart_service.resolve_cart(user.id if user else None, session_id)
        result = checkout_service.checkout(cart, body)

        return {
            "status": "success" if result['success'] else "failed",
            "session_id": session_id,
            "data": result
        }

    except EmptyCartError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except OutOfStockError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except PagaditoError as e:
        logger.error(f"Payment gateway error during checkout: {e}")
        raise HTTPException(status_code=502, detail=f"Payment gateway error: {str(e)}")
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error processing checkout: {str(e)}")
