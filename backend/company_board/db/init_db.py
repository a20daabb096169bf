from company_board.db.session import engine
from company_board.models import company  # noqa: F401
from company_board.models.base import Base

def create_tables():
    """Create missing tables directly (dev and tests); prod relies on Alembic."""
    Base.metadata.create_all(bind=engine)

def drop_tables():
    Base.metadata.drop_all(bind=engine)
