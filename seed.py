# seed.py
import logging

from sqlmodel import Session

from shopflow.core.logging_config import configure_logging
from shopflow.database import create_db_and_tables, engine
from shopflow.fixtures import seed_catalog

# Import models so SQLModel metadata is populated before create_all()
from shopflow.models import user as _user_models  # noqa: F401
from shopflow.models import product as _product_models  # noqa: F401

logger = logging.getLogger("shopflow.seed")


def main():
    configure_logging()
    create_db_and_tables()

    with Session(engine) as session:
        created = seed_catalog(session)

    logger.info("Seeded %d demo products", created)


if __name__ == "__main__":
    main()
