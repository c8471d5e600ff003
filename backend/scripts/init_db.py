"""Initialize the database - creates all tables."""
import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from studio.config import settings
from studio.database import engine, Base
import studio.models  # noqa: F401 - registers all models


def init_db():
    print(f"Creating Content Studio tables at {settings.DATABASE_URL} ...")
    Base.metadata.create_all(bind=engine)
    print(f"Content Studio database ready ({len(Base.metadata.tables)} tables).")


if __name__ == "__main__":
    init_db()
