# app/routes/dashboard.py

from fastapi import APIRouter, Depends
from app.dependencies import get_repository
from app.schemas.schemas import DashboardMetrics
from app.storage.base import Repository

router = APIRouter(
    prefix="/api/dashboard",
    tags=["dashboard"]
)


@router.get("/metrics", response_model=DashboardMetrics)
def dashboard_metrics(repo: Repository = Depends(get_repository)):
    """
    Summary figures for the dashboard:
    - paid sales of the current month
    - pending orders
    - units in stock over active products
    - active customers
    - low-stock products
    - overdue financial transactions
    """
    return repo.get_dashboard_metrics()
