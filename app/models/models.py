# app/models/models.py
from sqlalchemy import Column, Integer, String, Text, Numeric, DateTime, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from app.core import Base
from app.time_utils import utcnow


# -------------------- ERP Models --------------------

class UserORM(Base):
    __tablename__ = "users"
    __table_args__ = {"sqlite_autoincrement": True}  # ids are never reused

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(150), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="user")  # 'admin', 'user', 'seller'
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)

    sales_orders = relationship("SalesOrderORM", back_populates="seller")


class CustomerORM(Base):
    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255))
    phone = Column(String(50))
    document = Column(String(50))  # tax id
    address = Column(String(255))
    city = Column(String(100))
    state = Column(String(50))
    zip_code = Column(String(20))
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)

    sales_orders = relationship("SalesOrderORM", back_populates="customer")
    financial_transactions = relationship("FinancialTransactionORM", back_populates="customer")


class ProductORM(Base):
    __tablename__ = "products"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    code = Column(String(100), unique=True)
    description = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    cost = Column(Numeric(10, 2))
    category = Column(String(100))
    unit = Column(String(20), default="UN")
    current_stock = Column(Integer, default=0)
    minimum_stock = Column(Integer, default=0)
    active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow)

    order_items = relationship("SalesOrderItemORM", back_populates="product")


class SalesOrderORM(Base):
    __tablename__ = "sales_orders"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    number = Column(String(50), nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    sale_date = Column(DateTime, default=utcnow)
    status = Column(String(20), nullable=False, default="pending")  # 'pending', 'paid', 'cancelled'
    subtotal = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), default=0)
    total = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    customer = relationship("CustomerORM", back_populates="sales_orders")
    seller = relationship("UserORM", back_populates="sales_orders")
    items = relationship("SalesOrderItemORM", back_populates="order")


class SalesOrderItemORM(Base):
    __tablename__ = "sales_order_items"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    order_id = Column(Integer, ForeignKey("sales_orders.id"), nullable=False)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)
    discount = Column(Numeric(10, 2), default=0)
    total = Column(Numeric(10, 2), nullable=False)

    order = relationship("SalesOrderORM", back_populates="items")
    product = relationship("ProductORM", back_populates="order_items")


class FinancialTransactionORM(Base):
    __tablename__ = "financial_transactions"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True, index=True)
    type = Column(String(10), nullable=False)  # 'in', 'out'
    category = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    amount = Column(Numeric(10, 2), nullable=False)
    due_date = Column(DateTime, nullable=True)
    payment_date = Column(DateTime, nullable=True)
    status = Column(String(20), nullable=False, default="pending")  # 'pending', 'paid', 'overdue'
    order_id = Column(Integer, ForeignKey("sales_orders.id"), nullable=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=True)
    created_at = Column(DateTime, default=utcnow)

    order = relationship("SalesOrderORM")
    customer = relationship("CustomerORM", back_populates="financial_transactions")
