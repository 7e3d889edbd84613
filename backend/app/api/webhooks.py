"""
Webhook Endpoints
Pagadito payment notifications, signed with HMAC-SHA256 over the raw body

Author: TM3
Date: 2025-10-17
"""
import logging
from fastapi import APIRouter, Depends, Header, HTTPException, Request
from typing import Optional

from app.api.deps import get_checkout_service
from app.connectors.pagadito_connector import InvalidSignatureError
from app.services.checkout_service import CheckoutService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/pagadito")
async def pagadito_webhook(
    request: Request,
    x_pagadito_signature: Optional[str] = Header(None, alias="X-Pagadito-Signature"),
    checkout_service: CheckoutService = Depends(get_checkout_service)
):
    try:
        body = await request.body()
        result = checkout_service.handle_webhook(x_pagadito_signature, body)
        return {
            "status": "success",
            "data": result
        }

    except InvalidSignatureError as e:
        logger.warning(f"Rejected Pagadito webhook: {e}")
        raise HTTPException(status_code=401, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error processing Pagadito webhook: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing webhook: {str(e)}")
