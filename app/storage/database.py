# app/storage/database.py
"""
Relational repository backed by a SQLAlchemy session.

Each call maps onto one statement against the store (partial updates are a
single UPDATE ... WHERE id = ?, then a read); there is no cross-call
transaction, so composing an order with its items is left to the caller.
Store failures (SQLAlchemyError) propagate unchanged, except integrity errors
on unique columns which surface as ConflictError.
"""
from contextlib import contextmanager
from datetime import datetime
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.models import (
    UserORM,
    CustomerORM,
    ProductORM,
    SalesOrderORM,
    SalesOrderItemORM,
    FinancialTransactionORM,
)
from app.schemas import schemas
from app.storage.base import Repository
from app.storage.errors import ConflictError
from app.time_utils import month_bounds, to_naive_utc, utcnow
from app.user_management import hash_password


class DatabaseRepository(Repository):
    def __init__(self, db: Session):
        self.db = db

    # -------------------- Helpers --------------------
    @contextmanager
    def _writing(self, conflict=None):
        """Commit the statements run inside the block; unique-column violations become ConflictError."""
        try:
            yield
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            if conflict is not None:
                raise ConflictError(*conflict) from exc
            raise

    def _get(self, orm_cls, record_id: int):
        return self.db.query(orm_cls).filter(orm_cls.id == record_id).first()

    def _create(self, orm_cls, fields: dict, conflict=None):
        record = orm_cls(**fields)
        with self._writing(conflict):
            self.db.add(record)
        self.db.refresh(record)
        return record

    def _update(self, orm_cls, record_id: int, changes: dict, conflict=None):
        if not changes:
            return self._get(orm_cls, record_id)
        with self._writing(conflict):
            affected = (
                self.db.query(orm_cls)
                .filter(orm_cls.id == record_id)
                .update(changes, synchronize_session="fetch")
            )
        if not affected:
            return None
        record = self._get(orm_cls, record_id)
        self.db.refresh(record)
        return record

    def _soft_delete(self, orm_cls, record_id: int) -> bool:
        with self._writing():
            affected = (
                self.db.query(orm_cls)
                .filter(orm_cls.id == record_id)
                .update({orm_cls.active: False}, synchronize_session="fetch")
            )
        return affected > 0

    def _hard_delete(self, orm_cls, record_id: int) -> bool:
        with self._writing():
            affected = (
                self.db.query(orm_cls)
                .filter(orm_cls.id == record_id)
                .delete(synchronize_session="fetch")
            )
        return affected > 0

    @staticmethod
    def _one(schema_cls, record):
        return schema_cls.model_validate(record) if record is not None else None

    @staticmethod
    def _many(schema_cls, records) -> list:
        return [schema_cls.model_validate(r) for r in records]

    @staticmethod
    def _low_stock_filter():
        return (
            ProductORM.active.is_(True),
            func.coalesce(ProductORM.current_stock, 0) <= func.coalesce(ProductORM.minimum_stock, 0),
        )

    @staticmethod
    def _overdue_filter(now: datetime):
        return (
            FinancialTransactionORM.status != schemas.TransactionStatus.PAID.value,
            FinancialTransactionORM.due_date.is_not(None),
            FinancialTransactionORM.due_date < now,
        )

    # -------------------- Users --------------------
    def get_user(self, user_id: int) -> Optional[schemas.UserInDB]:
        return self._one(schemas.UserInDB, self._get(UserORM, user_id))

    def get_user_by_username(self, username: str) -> Optional[schemas.UserInDB]:
        user = self.db.query(UserORM).filter(UserORM.username == username).first()
        return self._one(schemas.UserInDB, user)

    def list_users(self) -> List[schemas.UserInDB]:
        return self._many(schemas.UserInDB, self.db.query(UserORM).order_by(UserORM.id).all())

    def create_user(self, data: schemas.UserCreate) -> schemas.UserInDB:
        fields = data.model_dump(exclude={"password"})
        fields["password_hash"] = hash_password(data.password)
        user = self._create(UserORM, fields, conflict=("users", "username", data.username))
        return self._one(schemas.UserInDB, user)

    def update_user(self, user_id: int, data: schemas.UserUpdate) -> Optional[schemas.UserInDB]:
        changes = data.changes()
        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))
        user = self._update(
            UserORM, user_id, changes, conflict=("users", "username", changes.get("username"))
        )
        return self._one(schemas.UserInDB, user)

    # -------------------- Customers --------------------
    def get_customer(self, customer_id: int) -> Optional[schemas.Customer]:
        return self._one(schemas.Customer, self._get(CustomerORM, customer_id))

    def list_customers(self, include_inactive: bool = False) -> List[schemas.Customer]:
        query = self.db.query(CustomerORM)
        if not include_inactive:
            query = query.filter(CustomerORM.active.is_(True))
        return self._many(schemas.Customer, query.order_by(CustomerORM.id).all())

    def create_customer(self, data: schemas.CustomerCreate) -> schemas.Customer:
        return self._one(schemas.Customer, self._create(CustomerORM, data.model_dump()))

    def update_customer(self, customer_id: int, data: schemas.CustomerUpdate) -> Optional[schemas.Customer]:
        return self._one(schemas.Customer, self._update(CustomerORM, customer_id, data.changes()))

    def deactivate_customer(self, customer_id: int) -> bool:
        return self._soft_delete(CustomerORM, customer_id)

    # -------------------- Products --------------------
    def get_product(self, product_id: int) -> Optional[schemas.Product]:
        return self._one(schemas.Product, self._get(ProductORM, product_id))

    def list_products(self, include_inactive: bool = False) -> List[schemas.Product]:
        query = self.db.query(ProductORM)
        if not include_inactive:
            query = query.filter(ProductORM.active.is_(True))
        return self._many(schemas.Product, query.order_by(ProductORM.id).all())

    def create_product(self, data: schemas.ProductCreate) -> schemas.Product:
        product = self._create(ProductORM, data.model_dump(), conflict=("products", "code", data.code))
        return self._one(schemas.Product, product)

    def update_product(self, product_id: int, data: schemas.ProductUpdate) -> Optional[schemas.Product]:
        changes = data.changes()
        product = self._update(
            ProductORM, product_id, changes, conflict=("products", "code", changes.get("code"))
        )
        return self._one(schemas.Product, product)

    def deactivate_product(self, product_id: int) -> bool:
        return self._soft_delete(ProductORM, product_id)

    def list_low_stock_products(self) -> List[schemas.Product]:
        products = (
            self.db.query(ProductORM)
            .filter(*self._low_stock_filter())
            .order_by(ProductORM.id)
            .all()
        )
        return self._many(schemas.Product, products)

    # -------------------- Sales Orders --------------------
    def get_sales_order(self, order_id: int) -> Optional[schemas.SalesOrder]:
        return self._one(schemas.SalesOrder, self._get(SalesOrderORM, order_id))

    def list_sales_orders(self) -> List[schemas.SalesOrder]:
        orders = self.db.query(SalesOrderORM).order_by(SalesOrderORM.id).all()
        return self._many(schemas.SalesOrder, orders)

    def create_sales_order(self, data: schemas.SalesOrderCreate) -> schemas.SalesOrder:
        # a null sale_date falls back to the column default (now)
        fields = data.model_dump(exclude_none=True)
        return self._one(schemas.SalesOrder, self._create(SalesOrderORM, fields))

    def update_sales_order(self, order_id: int, data: schemas.SalesOrderUpdate) -> Optional[schemas.SalesOrder]:
        return self._one(schemas.SalesOrder, self._update(SalesOrderORM, order_id, data.changes()))

    def delete_sales_order(self, order_id: int) -> bool:
        return self._hard_delete(SalesOrderORM, order_id)

    # -------------------- Sales Order Items --------------------
    def get_sales_order_item(self, item_id: int) -> Optional[schemas.SalesOrderItem]:
        return self._one(schemas.SalesOrderItem, self._get(SalesOrderItemORM, item_id))

    def list_sales_order_items(self, order_id: int) -> List[schemas.SalesOrderItem]:
        items = (
            self.db.query(SalesOrderItemORM)
            .filter(SalesOrderItemORM.order_id == order_id)
            .order_by(SalesOrderItemORM.id)
            .all()
        )
        return self._many(schemas.SalesOrderItem, items)

    def create_sales_order_item(self, data: schemas.SalesOrderItemCreate) -> schemas.SalesOrderItem:
        return self._one(schemas.SalesOrderItem, self._create(SalesOrderItemORM, data.model_dump()))

    def delete_sales_order_item(self, item_id: int) -> bool:
        return self._hard_delete(SalesOrderItemORM, item_id)

    # -------------------- Financial Transactions --------------------
    def get_financial_transaction(self, transaction_id: int) -> Optional[schemas.FinancialTransaction]:
        return self._one(schemas.FinancialTransaction, self._get(FinancialTransactionORM, transaction_id))

    def list_financial_transactions(self) -> List[schemas.FinancialTransaction]:
        transactions = self.db.query(FinancialTransactionORM).order_by(FinancialTransactionORM.id).all()
        return self._many(schemas.FinancialTransaction, transactions)

    def list_overdue_transactions(self, now: Optional[datetime] = None) -> List[schemas.FinancialTransaction]:
        transactions = (
            self.db.query(FinancialTransactionORM)
            .filter(*self._overdue_filter(to_naive_utc(now) if now else utcnow()))
            .order_by(FinancialTransactionORM.id)
            .all()
        )
        return self._many(schemas.FinancialTransaction, transactions)

    def create_financial_transaction(
        self, data: schemas.FinancialTransactionCreate
    ) -> schemas.FinancialTransaction:
        transaction = self._create(FinancialTransactionORM, data.model_dump())
        return self._one(schemas.FinancialTransaction, transaction)

    def update_financial_transaction(
        self, transaction_id: int, data: schemas.FinancialTransactionUpdate
    ) -> Optional[schemas.FinancialTransaction]:
        transaction = self._update(FinancialTransactionORM, transaction_id, data.changes())
        return self._one(schemas.FinancialTransaction, transaction)

    def delete_financial_transaction(self, transaction_id: int) -> bool:
        return self._hard_delete(FinancialTransactionORM, transaction_id)

    # -------------------- Dashboard --------------------
    def get_dashboard_metrics(self, now: Optional[datetime] = None) -> schemas.DashboardMetrics:
        now = to_naive_utc(now) if now else utcnow()
        month_start, month_end = month_bounds(now)

        monthly_sales = (
            self.db.query(func.coalesce(func.sum(SalesOrderORM.total), 0))
            .filter(
                SalesOrderORM.status == schemas.OrderStatus.PAID.value,
                SalesOrderORM.sale_date >= month_start,
                SalesOrderORM.sale_date < month_end,
            )
            .scalar()
        )
        pending_orders = (
            self.db.query(func.count(SalesOrderORM.id))
            .filter(SalesOrderORM.status == schemas.OrderStatus.PENDING.value)
            .scalar()
        )
        products_in_stock = (
            self.db.query(func.coalesce(func.sum(ProductORM.current_stock), 0))
            .filter(ProductORM.active.is_(True))
            .scalar()
        )
        active_customers = (
            self.db.query(func.count(CustomerORM.id))
            .filter(CustomerORM.active.is_(True))
            .scalar()
        )
        low_stock_count = (
            self.db.query(func.count(ProductORM.id))
            .filter(*self._low_stock_filter())
            .scalar()
        )
        overdue_count = (
            self.db.query(func.count(FinancialTransactionORM.id))
            .filter(*self._overdue_filter(now))
            .scalar()
        )

        return schemas.DashboardMetrics(
            monthly_sales=float(monthly_sales or 0),
            pending_orders=pending_orders or 0,
            products_in_stock=int(products_in_stock or 0),
            active_customers=active_customers or 0,
            low_stock_count=low_stock_count or 0,
            overdue_count=overdue_count or 0,
        )
