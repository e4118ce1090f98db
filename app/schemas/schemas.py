from enum import Enum
from typing import ClassVar, FrozenSet, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.time_utils import to_naive_utc


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"
    SELLER = "seller"


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


class TransactionType(str, Enum):
    IN = "in"
    OUT = "out"


class TransactionStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    OVERDUE = "overdue"


class Schema(BaseModel):
    # enums are kept as their plain string values so records compare and persist as text
    model_config = ConfigDict(use_enum_values=True, validate_default=True)


class Record(Schema):
    model_config = ConfigDict(use_enum_values=True, validate_default=True, from_attributes=True)


class UpdateSchema(Schema):
    """Sparse field set for a partial update.

    Fields listed in ``nullable_fields`` may be cleared with an explicit null;
    a null for any other field is ignored.
    """

    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()

    def changes(self) -> dict:
        fields = self.model_dump(exclude_unset=True)
        return {
            key: value for key, value in fields.items()
            if value is not None or key in self.nullable_fields
        }


def _naive_utc(value):
    if isinstance(value, datetime):
        return to_naive_utc(value)
    return value


# -------------------- Users --------------------

class UserBase(Schema):
    username: str = Field(..., min_length=1)
    name: str
    email: str
    role: UserRole = UserRole.USER
    active: bool = True


class UserCreate(UserBase):
    password: str = Field(..., min_length=1)


class UserUpdate(UpdateSchema):
    username: Optional[str] = Field(None, min_length=1)
    password: Optional[str] = Field(None, min_length=1)
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[UserRole] = None
    active: Optional[bool] = None


class User(Record):
    id: int
    username: str
    name: str
    email: str
    role: UserRole
    active: bool
    created_at: Optional[datetime] = None


class UserInDB(User):
    password_hash: str


class LoginRequest(Schema):
    username: str
    password: str


# -------------------- Customers --------------------

class CustomerBase(Schema):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    active: bool = True


class CustomerCreate(CustomerBase):
    pass


class CustomerUpdate(UpdateSchema):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"email", "phone", "document", "address", "city", "state", "zip_code"}
    )

    name: Optional[str] = Field(None, min_length=1)
    email: Optional[str] = None
    phone: Optional[str] = None
    document: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None
    active: Optional[bool] = None


class Customer(CustomerBase, Record):
    id: int
    created_at: Optional[datetime] = None


# -------------------- Products --------------------

class ProductBase(Schema):
    name: str = Field(..., min_length=1)
    code: Optional[str] = None
    description: Optional[str] = None
    price: float = Field(..., ge=0)
    cost: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    unit: str = "UN"
    current_stock: int = 0
    minimum_stock: int = 0
    active: bool = True


class ProductCreate(ProductBase):
    pass


class ProductUpdate(UpdateSchema):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"code", "description", "cost", "category"}
    )

    name: Optional[str] = Field(None, min_length=1)
    code: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    cost: Optional[float] = Field(None, ge=0)
    category: Optional[str] = None
    unit: Optional[str] = None
    current_stock: Optional[int] = None
    minimum_stock: Optional[int] = None
    active: Optional[bool] = None


class Product(ProductBase, Record):
    id: int
    created_at: Optional[datetime] = None


# -------------------- Sales Orders --------------------

class SalesOrderBase(Schema):
    number: str = Field(..., min_length=1)
    customer_id: Optional[int] = None
    sale_date: Optional[datetime] = None
    status: OrderStatus = OrderStatus.PENDING
    subtotal: float
    discount: float = 0
    total: float
    notes: Optional[str] = None
    seller_id: Optional[int] = None

    @field_validator("sale_date")
    @classmethod
    def normalize_sale_date(cls, value):
        return _naive_utc(value)


class SalesOrderCreate(SalesOrderBase):
    pass


class SalesOrderUpdate(UpdateSchema):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset({"customer_id", "notes", "seller_id"})

    number: Optional[str] = Field(None, min_length=1)
    customer_id: Optional[int] = None
    sale_date: Optional[datetime] = None
    status: Optional[OrderStatus] = None
    subtotal: Optional[float] = None
    discount: Optional[float] = None
    total: Optional[float] = None
    notes: Optional[str] = None
    seller_id: Optional[int] = None

    @field_validator("sale_date")
    @classmethod
    def normalize_sale_date(cls, value):
        return _naive_utc(value)


class SalesOrder(SalesOrderBase, Record):
    id: int
    created_at: Optional[datetime] = None


# -------------------- Sales Order Items --------------------

class SalesOrderItemBase(Schema):
    product_id: int
    quantity: int = Field(..., gt=0)
    unit_price: float
    discount: float = 0
    total: float


class SalesOrderItemCreate(SalesOrderItemBase):
    order_id: int


class SalesOrderItem(SalesOrderItemCreate, Record):
    id: int


# -------------------- Financial Transactions --------------------

class FinancialTransactionBase(Schema):
    type: TransactionType
    category: str
    description: str
    amount: float
    due_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    status: TransactionStatus = TransactionStatus.PENDING
    order_id: Optional[int] = None
    customer_id: Optional[int] = None

    @field_validator("due_date", "payment_date")
    @classmethod
    def normalize_dates(cls, value):
        return _naive_utc(value)


class FinancialTransactionCreate(FinancialTransactionBase):
    pass


class FinancialTransactionUpdate(UpdateSchema):
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset(
        {"due_date", "payment_date", "order_id", "customer_id"}
    )

    type: Optional[TransactionType] = None
    category: Optional[str] = None
    description: Optional[str] = None
    amount: Optional[float] = None
    due_date: Optional[datetime] = None
    payment_date: Optional[datetime] = None
    status: Optional[TransactionStatus] = None
    order_id: Optional[int] = None
    customer_id: Optional[int] = None

    @field_validator("due_date", "payment_date")
    @classmethod
    def normalize_dates(cls, value):
        return _naive_utc(value)


class FinancialTransaction(FinancialTransactionBase, Record):
    id: int
    created_at: Optional[datetime] = None


# -------------------- Dashboard --------------------

class DashboardMetrics(Schema):
    monthly_sales: float = 0.0
    pending_orders: int = 0
    products_in_stock: int = 0
    active_customers: int = 0
    low_stock_count: int = 0
    overdue_count: int = 0
