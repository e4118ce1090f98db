# app/storage/base.py
"""
Repository contract for the ERP back office.

Every read returns a pydantic record (see app.schemas.schemas) or ``None`` when
the id does not exist. Deletes return ``True``/``False``. Customers and
products are only ever deactivated (soft delete); sales orders, their items
and financial transactions are physically removed.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from app.schemas import schemas


class DeleteMode(str, Enum):
    SOFT = "soft"  # active flag flipped to false, record stays readable
    HARD = "hard"  # record removed


class Repository(ABC):
    DELETE_MODES: Dict[str, DeleteMode] = {
        "customer": DeleteMode.SOFT,
        "product": DeleteMode.SOFT,
        "sales_order": DeleteMode.HARD,
        "sales_order_item": DeleteMode.HARD,
        "financial_transaction": DeleteMode.HARD,
    }

    @classmethod
    def delete_mode(cls, entity: str) -> DeleteMode:
        return cls.DELETE_MODES[entity]

    # -------------------- Users --------------------
    @abstractmethod
    def get_user(self, user_id: int) -> Optional[schemas.UserInDB]: ...

    @abstractmethod
    def get_user_by_username(self, username: str) -> Optional[schemas.UserInDB]: ...

    @abstractmethod
    def list_users(self) -> List[schemas.UserInDB]: ...

    @abstractmethod
    def create_user(self, data: schemas.UserCreate) -> schemas.UserInDB: ...

    @abstractmethod
    def update_user(self, user_id: int, data: schemas.UserUpdate) -> Optional[schemas.UserInDB]: ...

    # -------------------- Customers --------------------
    @abstractmethod
    def get_customer(self, customer_id: int) -> Optional[schemas.Customer]: ...

    @abstractmethod
    def list_customers(self, include_inactive: bool = False) -> List[schemas.Customer]: ...

    @abstractmethod
    def create_customer(self, data: schemas.CustomerCreate) -> schemas.Customer: ...

    @abstractmethod
    def update_customer(self, customer_id: int, data: schemas.CustomerUpdate) -> Optional[schemas.Customer]: ...

    @abstractmethod
    def deactivate_customer(self, customer_id: int) -> bool: ...

    # -------------------- Products --------------------
    @abstractmethod
    def get_product(self, product_id: int) -> Optional[schemas.Product]: ...

    @abstractmethod
    def list_products(self, include_inactive: bool = False) -> List[schemas.Product]: ...

    @abstractmethod
    def create_product(self, data: schemas.ProductCreate) -> schemas.Product: ...

    @abstractmethod
    def update_product(self, product_id: int, data: schemas.ProductUpdate) -> Optional[schemas.Product]: ...

    @abstractmethod
    def deactivate_product(self, product_id: int) -> bool: ...

    @abstractmethod
    def list_low_stock_products(self) -> List[schemas.Product]: ...

    # -------------------- Sales Orders --------------------
    @abstractmethod
    def get_sales_order(self, order_id: int) -> Optional[schemas.SalesOrder]: ...

    @abstractmethod
    def list_sales_orders(self) -> List[schemas.SalesOrder]: ...

    @abstractmethod
    def create_sales_order(self, data: schemas.SalesOrderCreate) -> schemas.SalesOrder: ...

    @abstractmethod
    def update_sales_order(self, order_id: int, data: schemas.SalesOrderUpdate) -> Optional[schemas.SalesOrder]: ...

    @abstractmethod
    def delete_sales_order(self, order_id: int) -> bool: ...

    # -------------------- Sales Order Items --------------------
    @abstractmethod
    def get_sales_order_item(self, item_id: int) -> Optional[schemas.SalesOrderItem]: ...

    @abstractmethod
    def list_sales_order_items(self, order_id: int) -> List[schemas.SalesOrderItem]: ...

    @abstractmethod
    def create_sales_order_item(self, data: schemas.SalesOrderItemCreate) -> schemas.SalesOrderItem: ...

    @abstractmethod
    def delete_sales_order_item(self, item_id: int) -> bool: ...

    # -------------------- Financial Transactions --------------------
    @abstractmethod
    def get_financial_transaction(self, transaction_id: int) -> Optional[schemas.FinancialTransaction]: ...

    @abstractmethod
    def list_financial_transactions(self) -> List[schemas.FinancialTransaction]: ...

    @abstractmethod
    def list_overdue_transactions(self, now: Optional[datetime] = None) -> List[schemas.FinancialTransaction]: ...

    @abstractmethod
    def create_financial_transaction(
        self, data: schemas.FinancialTransactionCreate
    ) -> schemas.FinancialTransaction: ...

    @abstractmethod
    def update_financial_transaction(
        self, transaction_id: int, data: schemas.FinancialTransactionUpdate
    ) -> Optional[schemas.FinancialTransaction]: ...

    @abstractmethod
    def delete_financial_transaction(self, transaction_id: int) -> bool: ...

    # -------------------- Dashboard --------------------
    @abstractmethod
    def get_dashboard_metrics(self, now: Optional[datetime] = None) -> schemas.DashboardMetrics: ...
