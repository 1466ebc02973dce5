import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from src.extensions import db
from src.logger import get_logger
import models  # noqa: F401  registers every table on db.metadata

logger = get_logger("StockDash.Setup")


def create_tables(drop=False):
    if drop:
        db.drop_all()
    db.create_all()
    logger.info("All tables created: %s", ", ".join(sorted(db.metadata.tables)))


if __name__ == "__main__":
    from src.main import create_app
    app = create_app()
    with app.app_context():
        create_tables(drop="--drop" in sys.argv)
