"""
Products API Endpoints
Public catalog: listing, featured products and product detail

Author: TM3
Date: 2025-10-03
Updated: 2025-10-17 (storefront catalog, ProductRepository for data access)
"""
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from app.api.deps import get_product_repository
from app.repositories.product_repository import ProductRepository

router = APIRouter()


@router.get("/")
async def get_products(
    category_id: Optional[str] = Query(None, description="Filter by category"),
    featured: Optional[bool] = Query(None, description="Only featured products"),
    in_stock: Optional[bool] = Query(None, description="Filter by stock flag"),
    search: Optional[str] = Query(None, description="Search by name or description"),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    repo: ProductRepository = Depends(get_product_repository)
):
    """
    Get all products with optional filters
    """
    try:
        products, total = repo.find_all(
            category_id=category_id,
            featured=featured,
            in_stock=in_stock,
            search=search,
            limit=limit,
            offset=offset
        )

        return {
            "status": "success",
            "total": total,
            "limit": limit,
            "offset": offset,
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/featured")
async def get_featured_products(repo: ProductRepository = Depends(get_product_repository)):
    """Featured products for the home page"""
    try:
        products = repo.find_featured()
        return {
            "status": "success",
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching featured products: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: str, repo: ProductRepository = Depends(get_product_repository)):
    """
    Get a single product by ID
    """
    try:
        product = repo.find_by_id(product_id)

        if not product:
            raise HTTPException(status_code=404, detail="Product not found")

        return {
            "status": "success",
            "data": product.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")
