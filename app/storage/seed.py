# app/storage/seed.py
import logging

from app.schemas import schemas

logger = logging.getLogger(__name__)

DEFAULT_ADMIN = schemas.UserCreate(
    username="admin",
    password="admin123",
    name="Administrator",
    email="admin@example.com",
    role=schemas.UserRole.ADMIN,
)

SAMPLE_CUSTOMERS = [
    schemas.CustomerCreate(
        name="John Silva",
        email="john@example.com",
        phone="(11) 99999-9999",
        document="123.456.789-01",
        address="12 Flower Street",
        city="Sao Paulo",
        state="SP",
        zip_code="01234-567",
    ),
    schemas.CustomerCreate(
        name="Mary Santos",
        email="mary@example.com",
        phone="(21) 88888-8888",
        document="987.654.321-09",
        address="456 Main Avenue",
        city="Rio de Janeiro",
        state="RJ",
        zip_code="20000-000",
    ),
]

SAMPLE_PRODUCTS = [
    schemas.ProductCreate(
        name="Dell Inspiron Notebook",
        code="NB001",
        description="Dell Inspiron 15 3000 notebook",
        price=2500.00,
        cost=2000.00,
        category="Electronics",
        current_stock=5,
        minimum_stock=10,
    ),
    schemas.ProductCreate(
        name="Logitech MX Mouse",
        code="MS001",
        description="Logitech MX Master 3 mouse",
        price=350.00,
        cost=280.00,
        category="Peripherals",
        current_stock=12,
        minimum_stock=15,
    ),
]


def ensure_admin(repository) -> bool:
    """Create the default admin user unless the username is already taken."""
    if repository.get_user_by_username(DEFAULT_ADMIN.username) is not None:
        return False
    repository.create_user(DEFAULT_ADMIN)
    logger.info("Created default admin user '%s'", DEFAULT_ADMIN.username)
    return True


def seed_demo_data(repository, include_samples: bool = True) -> None:
    """
    Load the demonstration data set: one admin user plus two sample
    customers and products. Samples are only added to an empty catalogue,
    so running this at every startup does not duplicate them.
    """
    ensure_admin(repository)
    if not include_samples:
        return

    if not repository.list_customers(include_inactive=True):
        for customer in SAMPLE_CUSTOMERS:
            repository.create_customer(customer)
    if not repository.list_products(include_inactive=True):
        for product in SAMPLE_PRODUCTS:
            repository.create_product(product)
    logger.info("Demo data ready")
