# app/storage/metrics.py
"""
Dashboard figures shared by every repository.

monthly_sales only counts orders with status "paid" whose sale date falls in
the current calendar month (UTC). overdue_count counts transactions that are
not paid and whose due date is strictly before "now"; transactions without a
due date are never overdue.
"""
from app.schemas.schemas import OrderStatus, TransactionStatus
from app.time_utils import month_bounds


def is_low_stock(product) -> bool:
    return bool(product.active) and (product.current_stock or 0) <= (product.minimum_stock or 0)


def is_overdue(transaction, now) -> bool:
    if transaction.due_date is None or transaction.status == TransactionStatus.PAID:
        return False
    return transaction.due_date < now


def counts_towards_monthly_sales(order, now) -> bool:
    if order.status != OrderStatus.PAID or order.sale_date is None:
        return False
    start, end = month_bounds(now)
    return start <= order.sale_date < end
