"""
Admin API - Back office endpoints
- Login (admin token)
- Products and categories
- Active carts and orders
- WhatsApp and Pagadito settings
- Receipts

Every route except login requires an admin token.

Author: TM3
Date: 2025-10-17
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile, status
from pydantic import BaseModel

from app.api.deps import (
    get_cart_service,
    get_category_repository,
    get_order_repository,
    get_pagadito_service,
    get_product_repository,
    get_receipt_service,
    get_whatsapp_service,
)
from app.connectors.pagadito_connector import PagaditoAuthError, PagaditoConnector
from app.core.auth import TokenUser, create_access_token, require_admin, verify_admin_credentials
from app.core.config import settings
from app.domain.category import CategoryCreate, CategoryUpdate
from app.domain.product import ProductCreate, ProductUpdate
from app.domain.receipt import ReceiptCreate
from app.domain.settings import PagaditoConnectionTest, PagaditoSettings, WhatsAppSettings
from app.repositories.category_repository import CategoryRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.cart_service import CartService
from app.services.pagadito_service import PagaditoService
from app.services.receipt_service import ReceiptService
from app.services.storage_service import upload_product_image
from app.services.whatsapp_service import WhatsAppService

logger = logging.getLogger(__name__)

router = APIRouter()


class AdminLogin(BaseModel):
    username: str
    password: str


# =============================================================================
# Login
# =============================================================================

@router.post("/login")
async def admin_login(credentials: AdminLogin):
    """Exchange the admin username/password for a bearer token"""
    if not verify_admin_credentials(credentials.username, credentials.password):
        logger.warning(f"Failed admin login for '{credentials.username}'")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    token = create_access_token(credentials.username, role="admin")
    return {
        "access_token": token,
        "token_type": "bearer",
        "expires_in": settings.ADMIN_TOKEN_TTL_MINUTES * 60
    }


# =============================================================================
# Products
# =============================================================================

@router.get("/products")
async def list_products(
    search: Optional[str] = Query(None),
    category_id: Optional[str] = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        products, total = repo.find_all(category_id=category_id, search=search, limit=limit, offset=offset)
        return {
            "status": "success",
            "total": total,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.post("/products", status_code=201)
async def create_product(
    body: ProductCreate,
    admin: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        product = repo.create(body)
        logger.info(f"Product {product.id} created by {admin.id}")
        return {
            "status": "success",
            "data": product.to_dict()
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating product: {str(e)}")


@router.put("/products/{product_id}")
async def update_product(
    product_id: str,
    body: ProductUpdate,
    admin: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        product = repo.update(product_id, body)

        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating product: {str(e)}")


@router.delete("/products/{product_id}")
async def delete_product(
    product_id: str,
    admin: TokenUser = Depends(require_admin),
    repo: ProductRepository = Depends(get_product_repository)
):
    try:
        if not repo.delete(product_id):
            raise HTTPException(status_code=404, detail="Product not found")

        logger.info(f"Product {product_id} deleted by {admin.id}")
        return {"status": "success", "deleted": product_id}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting product: {str(e)}")


@router.post("/products/images")
async def upload_image(
    file: UploadFile = File(...),
    admin: TokenUser = Depends(require_admin)
):
    """Upload a product image to Supabase Storage and return its public URL"""
    try:
        data = await file.read()
        url = upload_product_image(file.filename, file.content_type, data)
        return {"status": "success", "url": url}

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error uploading image: {str(e)}")


# =============================================================================
# Categories
# =============================================================================

@router.post("/categories", status_code=201)
async def create_category(
    body: CategoryCreate,
    admin: TokenUser = Depends(require_admin),
    repo: CategoryRepository = Depends(get_category_repository)
):
    try:
        category = repo.create(body)
        return {"status": "success", "data": category.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating category: {str(e)}")


@router.put("/categories/{category_id}")
async def update_category(
    category_id: str,
    body: CategoryUpdate,
    admin: TokenUser = Depends(require_admin),
    repo: CategoryRepository = Depends(get_category_repository)
):
    try:
        category = repo.update(category_id, body)

        if not category:
            raise HTTPException(status_code=404, detail="Category not found")

        return {"status": "success", "data": category.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error updating category: {str(e)}")


@router.delete("/categories/{category_id}")
async def delete_category(
    category_id: str,
    admin: TokenUser = Depends(require_admin),
    repo: CategoryRepository = Depends(get_category_repository)
):
    """Delete a category; its products are kept without a category"""
    try:
        if not repo.delete(category_id):
            raise HTTPException(status_code=404, detail="Category not found")

        return {"status": "success", "deleted": category_id}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting category: {str(e)}")


# =============================================================================
# Carts
# =============================================================================

@router.get("/carts")
async def list_carts(
    search: Optional[str] = Query(None, description="Owner, session or product name"),
    admin: TokenUser = Depends(require_admin),
    cart_service: CartService = Depends(get_cart_service)
):
    try:
        result = cart_service.list_active_carts(search)
        return {
            "status": "success",
            "summary": result['summary'],
            "data": result['carts']
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching carts: {str(e)}")


@router.delete("/carts/items/{item_id}")
async def delete_cart_item(
    item_id: str,
    admin: TokenUser = Depends(require_admin),
    cart_service: CartService = Depends(get_cart_service)
):
    try:
        if not cart_service.remove_cart_line(item_id):
            raise HTTPException(status_code=404, detail="Cart item not found")

        return {"status": "success", "deleted": item_id}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error deleting cart item: {str(e)}")


@router.delete("/carts/{cart_id}")
async def clear_cart(
    cart_id: str,
    admin: TokenUser = Depends(require_admin),
    cart_service: CartService = Depends(get_cart_service)
):
    try:
        removed = cart_service.clear_cart_by_id(cart_id)
        return {"status": "success", "cart_id": cart_id, "removed_items": removed}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error clearing cart: {str(e)}")


# =============================================================================
# Orders
# =============================================================================

@router.get("/orders")
async def list_orders(
    payment_status: Optional[str] = Query(None),
    order_status: Optional[str] = Query(None, alias="status"),
    search: Optional[str] = Query(None),
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: TokenUser = Depends(require_admin),
    repo: OrderRepository = Depends(get_order_repository)
):
    try:
        orders, total = repo.find_all(
            payment_status=payment_status,
            status=order_status,
            search=search,
            limit=limit,
            offset=offset
        )
        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(orders),
            "data": [order.to_dict() for order in orders]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/orders/{order_id}")
async def get_order(
    order_id: str,
    admin: TokenUser = Depends(require_admin),
    repo: OrderRepository = Depends(get_order_repository)
):
    try:
        order = repo.find_by_id(order_id)

        if not order:
            raise HTTPException(status_code=404, detail="Order not found")

        return {"status": "success", "data": order.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


# =============================================================================
# WhatsApp settings
# =============================================================================

@router.get("/whatsapp")
async def get_whatsapp_settings(
    admin: TokenUser = Depends(require_admin),
    service: WhatsAppService = Depends(get_whatsapp_service)
):
    return {"status": "success", "data": service.get_settings().model_dump()}


@router.put("/whatsapp")
async def update_whatsapp_settings(
    body: WhatsAppSettings,
    admin: TokenUser = Depends(require_admin),
    service: WhatsAppService = Depends(get_whatsapp_service)
):
    try:
        saved = service.save_settings(body)
        return {"status": "success", "data": saved.model_dump()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving WhatsApp settings: {str(e)}")


# =============================================================================
# Pagadito settings
# =============================================================================

@router.get("/pagadito")
async def get_pagadito_settings(
    admin: TokenUser = Depends(require_admin),
    service: PagaditoService = Depends(get_pagadito_service)
):
    try:
        return {"status": "success", "data": service.get_settings().to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching Pagadito settings: {str(e)}")


@router.put("/pagadito")
async def update_pagadito_settings(
    body: PagaditoSettings,
    admin: TokenUser = Depends(require_admin),
    service: PagaditoService = Depends(get_pagadito_service)
):
    try:
        saved = service.save_settings(body)
        return {"status": "success", "data": saved.to_dict()}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error saving Pagadito settings: {str(e)}")


@router.post("/pagadito/webhook-key")
async def regenerate_webhook_key(
    admin: TokenUser = Depends(require_admin),
    service: PagaditoService = Depends(get_pagadito_service)
):
    """Generate a new webhook signing key (returned once, in full)"""
    try:
        key = service.rotate_webhook_key()
        return {"status": "success", "webhook_key": key}

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error generating webhook key: {str(e)}")


@router.post("/pagadito/test-connection")
async def test_pagadito_connection(
    body: PagaditoConnectionTest,
    admin: TokenUser = Depends(require_admin)
):
    try:
        connector = PagaditoConnector(
            uid=body.uid,
            wsk=body.wsk,
            sandbox=body.sandbox,
            success_rate=settings.PAGADITO_SUCCESS_RATE
        )
        result = connector.test_connection()
        return {
            "success": True,
            "message": "Connection successful",
            "data": result
        }

    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PagaditoAuthError as e:
        raise HTTPException(status_code=401, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error testing connection: {str(e)}")


# =============================================================================
# Receipts
# =============================================================================

@router.post("/receipts", status_code=201)
async def create_receipt(
    body: ReceiptCreate,
    admin: TokenUser = Depends(require_admin),
    service: ReceiptService = Depends(get_receipt_service)
):
    try:
        result = service.issue(body)
        return {
            "status": "success",
            "data": result['receipt'].to_dict(),
            "whatsapp_url": result['whatsapp_url']
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error creating receipt: {str(e)}")


@router.get("/receipts")
async def list_receipts(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    admin: TokenUser = Depends(require_admin),
    service: ReceiptService = Depends(get_receipt_service)
):
    try:
        receipts, total = service.list_receipts(limit=limit, offset=offset)
        return {
            "status": "success",
            "total": total,
            "count": len(receipts),
            "data": [receipt.to_dict() for receipt in receipts]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching receipts: {str(e)}")


@router.get("/receipts/{receipt_id}")
async def get_receipt(
    receipt_id: str,
    admin: TokenUser = Depends(require_admin),
    service: ReceiptService = Depends(get_receipt_service)
):
    try:
        receipt = service.get_receipt(receipt_id)

        if not receipt:
            raise HTTPException(status_code=404, detail="Receipt not found")

        return {"status": "success", "data": receipt.to_dict()}

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching receipt: {str(e)}")
