# app/routes/financial.py

from fastapi import APIRouter, Depends, HTTPException
from app.dependencies import get_repository
from app.schemas.schemas import (
    FinancialTransaction,
    FinancialTransactionCreate,
    FinancialTransactionUpdate,
)
from app.storage.base import Repository

router = APIRouter(
    prefix="/api/financial-transactions",
    tags=["financial"]
)


def _check_transaction_references(transaction, repo: Repository):
    if transaction.order_id is not None and not repo.get_sales_order(transaction.order_id):
        raise HTTPException(status_code=404, detail="Sales order not found")
    if transaction.customer_id is not None and not repo.get_customer(transaction.customer_id):
        raise HTTPException(status_code=404, detail="Customer not found")


@router.get("/", response_model=list[FinancialTransaction])
def get_all_transactions(repo: Repository = Depends(get_repository)):
    return repo.list_financial_transactions()


@router.get("/overdue", response_model=list[FinancialTransaction])
def get_overdue_transactions(repo: Repository = Depends(get_repository)):
    """Transactions not yet paid whose due date has passed"""
    return repo.list_overdue_transactions()


@router.get("/{transaction_id}", response_model=FinancialTransaction)
def get_transaction(transaction_id: int, repo: Repository = Depends(get_repository)):
    transaction = repo.get_financial_transaction(transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return transaction


@router.post("/", response_model=FinancialTransaction, status_code=201)
def create_transaction(transaction: FinancialTransactionCreate, repo: Repository = Depends(get_repository)):
    _check_transaction_references(transaction, repo)
    return repo.create_financial_transaction(transaction)


@router.put("/{transaction_id}", response_model=FinancialTransaction)
def update_transaction(
    transaction_id: int,
    transaction: FinancialTransactionUpdate,
    repo: Repository = Depends(get_repository)
):
    _check_transaction_references(transaction, repo)
    updated = repo.update_financial_transaction(transaction_id, transaction)
    if not updated:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return updated


@router.delete("/{transaction_id}", response_model=dict)
def delete_transaction(transaction_id: int, repo: Repository = Depends(get_repository)):
    if not repo.delete_financial_transaction(transaction_id):
        raise HTTPException(status_code=404, detail="Transaction not found")
    return {"message": f"Transaction {transaction_id} deleted successfully"}
