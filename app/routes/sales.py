# app/routes/sales.py

from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import get_repository
from app.schemas.schemas import (
    SalesOrder,
    SalesOrderCreate,
    SalesOrderUpdate,
    SalesOrderItem,
    SalesOrderItemBase,
    SalesOrderItemCreate,
)
from app.storage.base import Repository

router = APIRouter(
    prefix="/api/sales-orders",
    tags=["sales"]
)

items_router = APIRouter(
    prefix="/api/sales-order-items",
    tags=["sales"]
)


def _check_order_references(order, repo: Repository):
    """404 when the order points at a customer or seller that does not exist"""
    if order.customer_id is not None and not repo.get_customer(order.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    if order.seller_id is not None and not repo.get_user(order.seller_id):
        raise HTTPException(status_code=404, detail="Seller not found")


@router.get("/", response_model=list[SalesOrder])
def get_all_sales_orders(repo: Repository = Depends(get_repository)):
    """Retrieve all sales orders"""
    return repo.list_sales_orders()


@router.get("/{order_id}", response_model=SalesOrder)
def get_sales_order(order_id: int, repo: Repository = Depends(get_repository)):
    """Retrieve a specific sales order by ID"""
    order = repo.get_sales_order(order_id)
    if not order:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return order


@router.post("/", response_model=SalesOrder, status_code=201)
def create_sales_order(order: SalesOrderCreate, repo: Repository = Depends(get_repository)):
    """
    Create a sales order.
    - subtotal, discount and total are stored as sent
    - sale_date defaults to now, status to pending
    - stock is not touched; items are added separately
    """
    _check_order_references(order, repo)
    return repo.create_sales_order(order)


@router.put("/{order_id}", response_model=SalesOrder)
def update_sales_order(order_id: int, order: SalesOrderUpdate, repo: Repository = Depends(get_repository)):
    _check_order_references(order, repo)
    updated = repo.update_sales_order(order_id, order)
    if not updated:
        raise HTTPException(status_code=404, detail="Sales order not found")
    return updated


@router.delete("/{order_id}", response_model=dict)
def delete_sales_order(order_id: int, repo: Repository = Depends(get_repository)):
    if not repo.delete_sales_order(order_id):
        raise HTTPException(status_code=404, detail="Sales order not found")
    return {"message": f"Sales order {order_id} deleted successfully"}


# -------------------- Line Items --------------------

@router.get("/{order_id}/items", response_model=list[SalesOrderItem])
def get_sales_order_items(order_id: int, repo: Repository = Depends(get_repository)):
    if not repo.get_sales_order(order_id):
        raise HTTPException(status_code=404, detail="Sales order not found")
    return repo.list_sales_order_items(order_id)


@router.post("/{order_id}/items", response_model=SalesOrderItem, status_code=201)
def add_sales_order_item(order_id: int, item: SalesOrderItemBase, repo: Repository = Depends(get_repository)):
    """
    Add a line item to an order.
    - The order and the product must exist
    - The line total is stored as sent
    """
    if not repo.get_sales_order(order_id):
        raise HTTPException(status_code=404, detail="Sales order not found")
    if not repo.get_product(item.product_id):
        raise HTTPException(status_code=404, detail="Product not found")

    return repo.create_sales_order_item(SalesOrderItemCreate(order_id=order_id, **item.model_dump()))


@items_router.get("/{item_id}", response_model=SalesOrderItem)
def get_sales_order_item(item_id: int, repo: Repository = Depends(get_repository)):
    item = repo.get_sales_order_item(item_id)
    if not item:
        raise HTTPException(status_code=404, detail="Sales order item not found")
    return item


@items_router.delete("/{item_id}", response_model=dict)
def delete_sales_order_item(item_id: int, repo: Repository = Depends(get_repository)):
    if not repo.delete_sales_order_item(item_id):
        raise HTTPException(status_code=404, detail="Sales order item not found")
    return {"message": f"Sales order item {item_id} deleted successfully"}
