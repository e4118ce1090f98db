"""
Contract tests run against both the in-memory and the SQLite-backed repository.
"""
from datetime import datetime, timedelta, timezone

import pytest

from app.schemas import schemas
from app.storage.base import DeleteMode, Repository
from app.storage.errors import ConflictError
from app.time_utils import utcnow


def make_user(repo, username="maria", **overrides):
    data = dict(username=username, password="secret", name="Maria", email="maria@example.com")
    data.update(overrides)
    return repo.create_user(schemas.UserCreate(**data))


def make_customer(repo, name="ACME Ltda", **overrides):
    return repo.create_customer(schemas.CustomerCreate(name=name, **overrides))


def make_product(repo, name="Notebook", **overrides):
    data = dict(name=name, price=2500.00)
    data.update(overrides)
    return repo.create_product(schemas.ProductCreate(**data))


def make_order(repo, number="PV-0001", **overrides):
    data = dict(number=number, subtotal=100.0, total=100.0)
    data.update(overrides)
    return repo.create_sales_order(schemas.SalesOrderCreate(**data))


def make_transaction(repo, **overrides):
    data = dict(type="in", category="Sales", description="Invoice 1", amount=100.0)
    data.update(overrides)
    return repo.create_financial_transaction(schemas.FinancialTransactionCreate(**data))


# -------------------- Creation --------------------

def test_create_assigns_fresh_id_and_timestamp(repo):
    before = utcnow()
    first = make_customer(repo, name="First")
    second = make_customer(repo, name="Second")

    assert first.id > 0
    assert second.id != first.id
    assert first.created_at >= before
    assert second.created_at >= before


def test_create_applies_defaults(repo):
    product = make_product(repo)
    assert product.unit == "UN"
    assert product.current_stock == 0
    assert product.minimum_stock == 0
    assert product.active is True

    order = make_order(repo)
    assert order.status == "pending"
    assert order.discount == 0
    assert order.sale_date is not None

    transaction = make_transaction(repo)
    assert transaction.status == "pending"
    assert transaction.due_date is None

    user = make_user(repo)
    assert user.role == "user"
    assert user.active is True


def test_ids_are_not_reused_after_delete(repo):
    order = make_order(repo, number="A")
    assert repo.delete_sales_order(order.id) is True

    replacement = make_order(repo, number="B")
    assert replacement.id > order.id


def test_totals_are_stored_as_sent(repo):
    order = make_order(repo, subtotal=200.0, discount=50.0, total=999.0)
    assert order.total == 999.0

    product = make_product(repo)
    item = repo.create_sales_order_item(schemas.SalesOrderItemCreate(
        order_id=order.id, product_id=product.id, quantity=2, unit_price=10.0, total=7.0,
    ))
    assert item.total == 7.0
    assert item.discount == 0


# -------------------- Users --------------------

def test_password_is_hashed(repo):
    user = make_user(repo, password="admin123")
    assert user.password_hash != "admin123"
    assert user.password_hash.startswith("$2")


def test_get_user_by_username(repo):
    user = make_user(repo, username="joao")
    assert repo.get_user_by_username("joao").id == user.id
    assert repo.get_user_by_username("nobody") is None


def test_username_unique_even_when_inactive(repo):
    make_user(repo, username="carla", active=False)
    with pytest.raises(ConflictError):
        make_user(repo, username="carla")


def test_update_username_to_taken_one_conflicts(repo):
    make_user(repo, username="ana")
    other = make_user(repo, username="bia")
    with pytest.raises(ConflictError):
        repo.update_user(other.id, schemas.UserUpdate(username="ana"))


def test_update_password_rehashes(repo):
    user = make_user(repo)
    updated = repo.update_user(user.id, schemas.UserUpdate(password="new-password"))
    assert updated.password_hash != user.password_hash
    assert updated.created_at == user.created_at


def test_list_users_includes_inactive(repo):
    make_user(repo, username="on")
    make_user(repo, username="off", active=False)
    assert [u.username for u in repo.list_users()] == ["on", "off"]


# -------------------- Soft delete --------------------

def test_deleted_customer_is_hidden_from_list_but_readable(repo):
    keep = make_customer(repo, name="Keep")
    gone = make_customer(repo, name="Gone")

    assert repo.deactivate_customer(gone.id) is True

    assert [c.id for c in repo.list_customers()] == [keep.id]
    fetched = repo.get_customer(gone.id)
    assert fetched is not None
    assert fetched.active is False
    assert {c.id for c in repo.list_customers(include_inactive=True)} == {keep.id, gone.id}


def test_deleted_product_is_hidden_from_list_but_readable(repo):
    product = make_product(repo)
    assert repo.deactivate_product(product.id) is True

    assert repo.list_products() == []
    assert repo.get_product(product.id).active is False


def test_soft_delete_missing_id(repo):
    assert repo.deactivate_customer(9999) is False
    assert repo.deactivate_product(9999) is False


# -------------------- Hard delete --------------------

def test_deleted_order_item_and_transaction_are_gone(repo):
    order = make_order(repo)
    product = make_product(repo)
    item = repo.create_sales_order_item(schemas.SalesOrderItemCreate(
        order_id=order.id, product_id=product.id, quantity=1, unit_price=10.0, total=10.0,
    ))
    transaction = make_transaction(repo)

    assert repo.delete_sales_order_item(item.id) is True
    assert repo.get_sales_order_item(item.id) is None

    assert repo.delete_sales_order(order.id) is True
    assert repo.get_sales_order(order.id) is None

    assert repo.delete_financial_transaction(transaction.id) is True
    assert repo.get_financial_transaction(transaction.id) is None


def test_hard_delete_missing_id(repo):
    assert repo.delete_sales_order(9999) is False
    assert repo.delete_sales_order_item(9999) is False
    assert repo.delete_financial_transaction(9999) is False


def test_delete_modes():
    assert Repository.delete_mode("customer") == DeleteMode.SOFT
    assert Repository.delete_mode("product") == DeleteMode.SOFT
    assert Repository.delete_mode("sales_order") == DeleteMode.HARD
    assert Repository.delete_mode("sales_order_item") == DeleteMode.HARD
    assert Repository.delete_mode("financial_transaction") == DeleteMode.HARD


# -------------------- Partial update --------------------

def test_empty_update_returns_record_unchanged(repo):
    customer = make_customer(repo, email="a@example.com")
    updated = repo.update_customer(customer.id, schemas.CustomerUpdate())
    assert updated == customer


def test_update_merges_only_sent_fields(repo):
    customer = make_customer(repo, email="a@example.com", city="Campinas")
    updated = repo.update_customer(customer.id, schemas.CustomerUpdate(city="Santos"))

    assert updated.city == "Santos"
    assert updated.email == "a@example.com"
    assert updated.id == customer.id
    assert updated.created_at == customer.created_at


def test_update_null_clears_optional_but_not_required(repo):
    customer = make_customer(repo, email="a@example.com")
    updated = repo.update_customer(customer.id, schemas.CustomerUpdate(email=None, name=None))

    assert updated.email is None
    assert updated.name == customer.name


def test_update_missing_id_returns_none_for_every_entity(repo):
    assert repo.update_user(9999, schemas.UserUpdate(name="x")) is None
    assert repo.update_customer(9999, schemas.CustomerUpdate(name="x")) is None
    assert repo.update_product(9999, schemas.ProductUpdate(name="x")) is None
    assert repo.update_sales_order(9999, schemas.SalesOrderUpdate(status="paid")) is None
    assert repo.update_financial_transaction(9999, schemas.FinancialTransactionUpdate(status="paid")) is None


def test_get_missing_id_returns_none(repo):
    assert repo.get_user(9999) is None
    assert repo.get_customer(9999) is None
    assert repo.get_product(9999) is None
    assert repo.get_sales_order(9999) is None
    assert repo.get_sales_order_item(9999) is None
    assert repo.get_financial_transaction(9999) is None


def test_duplicate_product_code_conflicts(repo):
    make_product(repo, code="NB001")
    with pytest.raises(ConflictError):
        make_product(repo, name="Other", code="NB001")
    # products without a code never clash
    make_product(repo, name="A")
    make_product(repo, name="B")


def test_conflicting_update_leaves_record_untouched(repo):
    make_product(repo, name="Mouse", code="MS001")
    product = make_product(repo, name="Notebook", code="NB001")

    with pytest.raises(ConflictError):
        repo.update_product(product.id, schemas.ProductUpdate(code="MS001", price=10.0))

    stored = repo.get_product(product.id)
    assert stored.code == "NB001"
    assert float(stored.price) == pytest.approx(2500.00)

    updated = repo.update_product(product.id, schemas.ProductUpdate(price=10.0))
    assert float(updated.price) == pytest.approx(10.0)


# -------------------- Low stock --------------------

def test_low_stock_set(repo):
    low = make_product(repo, name="Low", current_stock=5, minimum_stock=10)
    make_product(repo, name="Plenty", current_stock=50, minimum_stock=10)
    edge = make_product(repo, name="Edge", current_stock=10, minimum_stock=10)
    inactive = make_product(repo, name="Inactive", current_stock=0, minimum_stock=10)
    repo.deactivate_product(inactive.id)

    assert [p.id for p in repo.list_low_stock_products()] == [low.id, edge.id]


def test_restocking_removes_product_from_low_stock(repo):
    product = make_product(repo, current_stock=5, minimum_stock=10)
    assert [p.id for p in repo.list_low_stock_products()] == [product.id]

    repo.update_product(product.id, schemas.ProductUpdate(current_stock=10))
    assert [p.id for p in repo.list_low_stock_products()] == [product.id]

    repo.update_product(product.id, schemas.ProductUpdate(current_stock=11))
    assert repo.list_low_stock_products() == []


# -------------------- Sales order items --------------------

def test_items_listed_per_order(repo):
    first = make_order(repo, number="1")
    second = make_order(repo, number="2")
    product = make_product(repo)

    def add(order):
        return repo.create_sales_order_item(schemas.SalesOrderItemCreate(
            order_id=order.id, product_id=product.id, quantity=1, unit_price=5.0, total=5.0,
        ))

    a = add(first)
    add(second)
    b = add(first)

    assert [i.id for i in repo.list_sales_order_items(first.id)] == [a.id, b.id]
    assert repo.list_sales_order_items(9999) == []


# -------------------- Overdue --------------------

def test_overdue_transactions(repo):
    now = utcnow()
    overdue = make_transaction(repo, due_date=now - timedelta(days=1))
    make_transaction(repo, due_date=now + timedelta(days=1))
    make_transaction(repo, due_date=now - timedelta(days=1), status="paid")
    make_transaction(repo)
    flagged = make_transaction(repo, due_date=now - timedelta(days=3), status="overdue")

    assert [t.id for t in repo.list_overdue_transactions(now)] == [overdue.id, flagged.id]


# -------------------- Dashboard --------------------

def test_dashboard_on_empty_store(repo):
    metrics = repo.get_dashboard_metrics()
    assert metrics == schemas.DashboardMetrics()


def test_dashboard_single_low_stock_product(repo):
    make_product(repo, price=2500.00, current_stock=5, minimum_stock=10)

    assert len(repo.list_low_stock_products()) == 1
    metrics = repo.get_dashboard_metrics()
    assert metrics.products_in_stock == 5
    assert metrics.low_stock_count == 1


def test_dashboard_overdue_count_follows_payment(repo):
    baseline = repo.get_dashboard_metrics().overdue_count
    transaction = make_transaction(repo, due_date=utcnow() - timedelta(days=1))

    assert repo.get_dashboard_metrics().overdue_count == baseline + 1

    repo.update_financial_transaction(transaction.id, schemas.FinancialTransactionUpdate(status="paid"))
    assert repo.get_dashboard_metrics().overdue_count == baseline


def test_dashboard_monthly_sales_counts_paid_orders_of_current_month(repo):
    now = datetime(2026, 10, 19, 12, 0)
    make_order(repo, number="1", status="paid", total=100.0, sale_date=datetime(2026, 10, 5))
    make_order(repo, number="2", status="paid", total=50.0, sale_date=datetime(2026, 9, 30, 23, 59))
    make_order(repo, number="3", status="pending", total=70.0, sale_date=datetime(2026, 10, 10))
    make_order(repo, number="4", status="paid", total=30.0, sale_date=datetime(2026, 11, 1))
    make_order(repo, number="5", status="cancelled", total=20.0, sale_date=datetime(2026, 10, 1))

    metrics = repo.get_dashboard_metrics(now=now)
    assert metrics.monthly_sales == pytest.approx(100.0)
    assert metrics.pending_orders == 1


def test_dashboard_counts_only_active_records(repo):
    make_customer(repo, name="A")
    gone = make_customer(repo, name="B")
    repo.deactivate_customer(gone.id)
    make_product(repo, name="On", current_stock=7, minimum_stock=1)
    off = make_product(repo, name="Off", current_stock=100, minimum_stock=1)
    repo.deactivate_product(off.id)

    metrics = repo.get_dashboard_metrics()
    assert metrics.active_customers == 1
    assert metrics.products_in_stock == 7
    assert metrics.low_stock_count == 0


def test_timezone_aware_now_is_taken_as_utc(repo):
    transaction = make_transaction(repo, due_date=utcnow() - timedelta(hours=1))
    make_order(repo, status="paid", total=80.0, sale_date=utcnow())
    now = datetime.now(timezone(timedelta(hours=-3)))

    assert [t.id for t in repo.list_overdue_transactions(now=now)] == [transaction.id]

    metrics = repo.get_dashboard_metrics(now=now)
    assert metrics.overdue_count == 1
    assert metrics.monthly_sales == pytest.approx(80.0)
