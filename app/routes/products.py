from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from app.dependencies import get_repository
from app.schemas.schemas import Product, ProductCreate, ProductUpdate
from app.storage.base import Repository

router = APIRouter(prefix="/api/products", tags=["Products"])


@router.get("/", response_model=List[Product])
def get_products(
    include_inactive: bool = Query(False, description="Also return deactivated products"),
    repo: Repository = Depends(get_repository)
):
    """Return all active products"""
    return repo.list_products(include_inactive=include_inactive)


@router.get("/low-stock", response_model=List[Product])
def low_stock(repo: Repository = Depends(get_repository)):
    """
    List active products where current_stock <= minimum_stock
    """
    return repo.list_low_stock_products()


@router.get("/{product_id}", response_model=Product)
def get_product(product_id: int, repo: Repository = Depends(get_repository)):
    product = repo.get_product(product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.post("/", response_model=Product, status_code=201)
def create_product(product: ProductCreate, repo: Repository = Depends(get_repository)):
    return repo.create_product(product)


@router.put("/{product_id}", response_model=Product)
def update_product(product_id: int, product: ProductUpdate, repo: Repository = Depends(get_repository)):
    """
    Partially update a product.
    - Only the fields sent in the body are changed
    - Returns the updated product
    """
    updated = repo.update_product(product_id, product)
    if not updated:
        raise HTTPException(status_code=404, detail="Product not found")
    return updated


@router.delete("/{product_id}", response_model=dict)
def delete_product(product_id: int, repo: Repository = Depends(get_repository)):
    """Deactivate a product (it stays readable by id)."""
    if not repo.deactivate_product(product_id):
        raise HTTPException(status_code=404, detail="Product not found")
    return {"message": f"Product {product_id} removed successfully"}
