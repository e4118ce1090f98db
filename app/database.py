# app/database.py
import logging
from app.core import Base, engine, make_sessionmaker

logger = logging.getLogger("database")


# -------------------- Initialize DB --------------------
def init_db(bind=None, seed: bool = True):
    """Create the ERP tables if missing, then load the admin user and demo data once."""
    from app.models import models  # noqa: F401  (registers tables on Base)
    from app.storage.database import DatabaseRepository
    from app.storage.seed import seed_demo_data

    bind = bind if bind is not None else engine
    try:
        Base.metadata.create_all(bind=bind)
        logger.info("✅ Database tables created or verified successfully.")
    except Exception as e:
        logger.exception(f"❌ Failed to initialize database: {e}")
        raise

    if seed:
        db = make_sessionmaker(bind)()
        try:
            seed_demo_data(DatabaseRepository(db))
        finally:
            db.close()
