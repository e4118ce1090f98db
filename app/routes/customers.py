# app/routes/customers.py

from fastapi import APIRouter, Depends, HTTPException, Query
from app.dependencies import get_repository
from app.schemas.schemas import Customer, CustomerCreate, CustomerUpdate
from app.storage.base import Repository

router = APIRouter(
    prefix="/api/customers",
    tags=["customers"]
)


@router.get("/", response_model=list[Customer])
def get_customers(
    include_inactive: bool = Query(False, description="Also return deactivated customers"),
    repo: Repository = Depends(get_repository)
):
    return repo.list_customers(include_inactive=include_inactive)


@router.get("/{customer_id}", response_model=Customer)
def get_customer(customer_id: int, repo: Repository = Depends(get_repository)):
    customer = repo.get_customer(customer_id)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return customer


@router.post("/", response_model=Customer, status_code=201)
def create_customer(customer: CustomerCreate, repo: Repository = Depends(get_repository)):
    return repo.create_customer(customer)


@router.put("/{customer_id}", response_model=Customer)
def update_customer(customer_id: int, customer: CustomerUpdate, repo: Repository = Depends(get_repository)):
    updated = repo.update_customer(customer_id, customer)
    if not updated:
        raise HTTPException(status_code=404, detail="Customer not found")
    return updated


@router.delete("/{customer_id}", response_model=dict)
def delete_customer(customer_id: int, repo: Repository = Depends(get_repository)):
    """
    Deactivate a customer.
    - The record stays readable by id with active=false
    - It no longer shows up in the customer list
    """
    if not repo.deactivate_customer(customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")
    return {"message": f"Customer {customer_id} removed successfully"}
