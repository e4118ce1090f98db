# app/storage/memory.py
"""
In-memory repository used for tests and demos.

A MemoryStore owns one insertion-ordered dict and one id counter per entity
group. Counters start at 1 and only ever move forward, so ids are never
reused after a delete. Not safe for concurrent mutation without external
locking.
"""
from datetime import datetime
from typing import Dict, List, Optional

from app.schemas import schemas
from app.storage.base import Repository
from app.storage.errors import ConflictError
from app.storage.metrics import counts_towards_monthly_sales, is_low_stock, is_overdue
from app.storage.seed import seed_demo_data
from app.time_utils import to_naive_utc, utcnow
from app.user_management import hash_password


class MemoryStore:
    ENTITIES = (
        "users",
        "customers",
        "products",
        "sales_orders",
        "sales_order_items",
        "financial_transactions",
    )

    def __init__(self):
        self.records: Dict[str, Dict[int, object]] = {name: {} for name in self.ENTITIES}
        self.counters: Dict[str, int] = {name: 1 for name in self.ENTITIES}

    def next_id(self, entity: str) -> int:
        new_id = self.counters[entity]
        self.counters[entity] = new_id + 1
        return new_id

    def table(self, entity: str) -> Dict[int, object]:
        return self.records[entity]


class InMemoryRepository(Repository):
    def __init__(self, store: Optional[MemoryStore] = None, seed: bool = True):
        self.store = store if store is not None else MemoryStore()
        if seed:
            seed_demo_data(self)

    # -------------------- Helpers --------------------
    def _get(self, entity: str, record_id: int):
        record = self.store.table(entity).get(record_id)
        return record.model_copy() if record is not None else None

    def _all(self, entity: str) -> list:
        return [record.model_copy() for record in self.store.table(entity).values()]

    def _insert(self, entity: str, model_cls, fields: dict, timestamped: bool = True):
        record_id = self.store.next_id(entity)
        if timestamped:
            fields["created_at"] = utcnow()
        record = model_cls(id=record_id, **fields)
        self.store.table(entity)[record_id] = record
        return record.model_copy()

    def _merge(self, entity: str, record_id: int, changes: dict):
        table = self.store.table(entity)
        record = table.get(record_id)
        if record is None:
            return None
        changes.pop("id", None)
        changes.pop("created_at", None)
        updated = record.model_copy(update=changes)
        table[record_id] = updated
        return updated.model_copy()

    def _soft_delete(self, entity: str, record_id: int) -> bool:
        return self._merge(entity, record_id, {"active": False}) is not None

    def _hard_delete(self, entity: str, record_id: int) -> bool:
        return self.store.table(entity).pop(record_id, None) is not None

    def _check_unique(self, entity: str, field: str, value, exclude_id: Optional[int] = None):
        if value is None:
            return
        for record in self.store.table(entity).values():
            if record.id != exclude_id and getattr(record, field) == value:
                raise ConflictError(entity, field, value)

    # -------------------- Users --------------------
    def get_user(self, user_id: int) -> Optional[schemas.UserInDB]:
        return self._get("users", user_id)

    def get_user_by_username(self, username: str) -> Optional[schemas.UserInDB]:
        for user in self.store.table("users").values():
            if user.username == username:
                return user.model_copy()
        return None

    def list_users(self) -> List[schemas.UserInDB]:
        return self._all("users")

    def create_user(self, data: schemas.UserCreate) -> schemas.UserInDB:
        self._check_unique("users", "username", data.username)
        fields = data.model_dump(exclude={"password"})
        fields["password_hash"] = hash_password(data.password)
        return self._insert("users", schemas.UserInDB, fields)

    def update_user(self, user_id: int, data: schemas.UserUpdate) -> Optional[schemas.UserInDB]:
        if user_id not in self.store.table("users"):
            return None
        changes = data.changes()
        if "username" in changes:
            self._check_unique("users", "username", changes["username"], exclude_id=user_id)
        if "password" in changes:
            changes["password_hash"] = hash_password(changes.pop("password"))
        return self._merge("users", user_id, changes)

    # -------------------- Customers --------------------
    def get_customer(self, customer_id: int) -> Optional[schemas.Customer]:
        return self._get("customers", customer_id)

    def list_customers(self, include_inactive: bool = False) -> List[schemas.Customer]:
        return [c for c in self._all("customers") if include_inactive or c.active]

    def create_customer(self, data: schemas.CustomerCreate) -> schemas.Customer:
        return self._insert("customers", schemas.Customer, data.model_dump())

    def update_customer(self, customer_id: int, data: schemas.CustomerUpdate) -> Optional[schemas.Customer]:
        return self._merge("customers", customer_id, data.changes())

    def deactivate_customer(self, customer_id: int) -> bool:
        return self._soft_delete("customers", customer_id)

    # -------------------- Products --------------------
    def get_product(self, product_id: int) -> Optional[schemas.Product]:
        return self._get("products", product_id)

    def list_products(self, include_inactive: bool = False) -> List[schemas.Product]:
        return [p for p in self._all("products") if include_inactive or p.active]

    def create_product(self, data: schemas.ProductCreate) -> schemas.Product:
        self._check_unique("products", "code", data.code)
        return self._insert("products", schemas.Product, data.model_dump())

    def update_product(self, product_id: int, data: schemas.ProductUpdate) -> Optional[schemas.Product]:
        if product_id not in self.store.table("products"):
            return None
        changes = data.changes()
        if changes.get("code") is not None:
            self._check_unique("products", "code", changes["code"], exclude_id=product_id)
        return self._merge("products", product_id, changes)

    def deactivate_product(self, product_id: int) -> bool:
        return self._soft_delete("products", product_id)

    def list_low_stock_products(self) -> List[schemas.Product]:
        return [p for p in self._all("products") if is_low_stock(p)]

    # -------------------- Sales Orders --------------------
    def get_sales_order(self, order_id: int) -> Optional[schemas.SalesOrder]:
        return self._get("sales_orders", order_id)

    def list_sales_orders(self) -> List[schemas.SalesOrder]:
        return self._all("sales_orders")

    def create_sales_order(self, data: schemas.SalesOrderCreate) -> schemas.SalesOrder:
        fields = data.model_dump()
        if fields["sale_date"] is None:
            fields["sale_date"] = utcnow()
        return self._insert("sales_orders", schemas.SalesOrder, fields)

    def update_sales_order(self, order_id: int, data: schemas.SalesOrderUpdate) -> Optional[schemas.SalesOrder]:
        return self._merge("sales_orders", order_id, data.changes())

    def delete_sales_order(self, order_id: int) -> bool:
        return self._hard_delete("sales_orders", order_id)

    # -------------------- Sales Order Items --------------------
    def get_sales_order_item(self, item_id: int) -> Optional[schemas.SalesOrderItem]:
        return self._get("sales_order_items", item_id)

    def list_sales_order_items(self, order_id: int) -> List[schemas.SalesOrderItem]:
        return [item for item in self._all("sales_order_items") if item.order_id == order_id]

    def create_sales_order_item(self, data: schemas.SalesOrderItemCreate) -> schemas.SalesOrderItem:
        return self._insert("sales_order_items", schemas.SalesOrderItem, data.model_dump(), timestamped=False)

    def delete_sales_order_item(self, item_id: int) -> bool:
        return self._hard_delete("sales_order_items", item_id)

    # -------------------- Financial Transactions --------------------
    def get_financial_transaction(self, transaction_id: int) -> Optional[schemas.FinancialTransaction]:
        return self._get("financial_transactions", transaction_id)

    def list_financial_transactions(self) -> List[schemas.FinancialTransaction]:
        return self._all("financial_transactions")

    def list_overdue_transactions(self, now: Optional[datetime] = None) -> List[schemas.FinancialTransaction]:
        now = to_naive_utc(now) if now else utcnow()
        return [t for t in self._all("financial_transactions") if is_overdue(t, now)]

    def create_financial_transaction(
        self, data: schemas.FinancialTransactionCreate
    ) -> schemas.FinancialTransaction:
        return self._insert("financial_transactions", schemas.FinancialTransaction, data.model_dump())

    def update_financial_transaction(
        self, transaction_id: int, data: schemas.FinancialTransactionUpdate
    ) -> Optional[schemas.FinancialTransaction]:
        return self._merge("financial_transactions", transaction_id, data.changes())

    def delete_financial_transaction(self, transaction_id: int) -> bool:
        return self._hard_delete("financial_transactions", transaction_id)

    # -------------------- Dashboard --------------------
    def get_dashboard_metrics(self, now: Optional[datetime] = None) -> schemas.DashboardMetrics:
        now = to_naive_utc(now) if now else utcnow()
        orders = self.store.table("sales_orders").values()
        products = self.store.table("products").values()

        monthly_sales = sum(o.total for o in orders if counts_towards_monthly_sales(o, now))
        pending_orders = sum(1 for o in orders if o.status == schemas.OrderStatus.PENDING)
        products_in_stock = sum(p.current_stock or 0 for p in products if p.active)
        active_customers = sum(1 for c in self.store.table("customers").values() if c.active)
        low_stock_count = sum(1 for p in products if is_low_stock(p))
        overdue_count = sum(
            1 for t in self.store.table("financial_transactions").values() if is_overdue(t, now)
        )

        return schemas.DashboardMetrics(
            monthly_sales=monthly_sales,
            pending_orders=pending_orders,
            products_in_stock=products_in_stock,
            active_customers=active_customers,
            low_stock_count=low_stock_count,
            overdue_count=overdue_count,
        )
