import uuid

from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from .config import settings


connect_args = {}
if settings.DATABASE_URL.startswith("sqlite"):
    # the request threadpool hands the connection between threads
    connect_args = {"check_same_thread": False}

engine = create_engine(settings.DATABASE_URL, connect_args=connect_args, pool_pre_ping=True)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()



def new_id() -> str:
    """opaque primary key for every stored document"""
    return uuid.uuid4().hex


def is_valid_id(value: str) -> bool:
    """True for ids shaped like the ones new_id() hands out"""
    try:
        return uuid.UUID(hex=value).hex == value
    except (TypeError, ValueError):
        return False



def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()



def create_tables(bind=None):
    # models register themselves on Base.metadata when imported
    from .auth import models as auth_models  # noqa: F401
    from .groups import models as group_models  # noqa: F401
    from .posts import models as post_models  # noqa: F401
    from .comments import models as comment_models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)
