"""
Categories API Endpoints

Author: TM3
Date: 2025-10-17
"""
from fastapi import APIRouter, Depends, HTTPException

from app.api.deps import get_category_repository, get_product_repository
from app.repositories.category_repository import CategoryRepository
from app.repositories.product_repository import ProductRepository

router = APIRouter()


@router.get("/")
async def get_categories(repo: CategoryRepository = Depends(get_category_repository)):
    try:
        categories = repo.find_all()
        return {
            "status": "success",
            "count": len(categories),
            "data": [category.to_dict() for category in categories]
        }

    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/{category_id}")
async def get_category(category_id: str, repo: CategoryRepository = Depends(get_category_repository)):
    try:
        category = repo.find_by_id(category_id)

        if not category:
            raise HTTPException(status_code=404, detail="Category not found")

        return {
            "status": "success",
            "data": category.to_dict()
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching category: {str(e)}")


@router.get("/{category_id}/products")
async def get_category_products(
    category_id: str,
    repo: CategoryRepository = Depends(get_category_repository),
    product_repo: ProductRepository = Depends(get_product_repository)
):
    """Category detail plus its products"""
    try:
        category = repo.find_by_id(category_id)

        if not category:
            raise HTTPException(status_code=404, detail="Category not found")

        products = product_repo.find_by_category(category_id)
        return {
            "status": "success",
            "category": category.to_dict(),
            "count": len(products),
            "data": [product.to_dict() for product in products]
        }

    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Error fetching category products: {str(e)}")
