from typing import Generator

from sqlalchemy.orm import sessionmaker
from sqlmodel import Session, SQLModel, create_engine

from klub.core.config import settings

connect_args = {}
if settings.SQLALCHEMY_DATABASE_URI.startswith("sqlite"):
    # Endpoints run in FastAPI's threadpool
    connect_args["check_same_thread"] = False

engine = create_engine(settings.SQLALCHEMY_DATABASE_URI, connect_args=connect_args)  # type: ignore

SessionLocal = sessionmaker(bind=engine, class_=Session, autocommit=False, autoflush=False)


def get_db() -> Generator[Session, None, None]:
    with SessionLocal() as session:
        yield session


def init_db(bind=None) -> None:
    """Create all tables registered on the SQLModel metadata."""
    import klub.models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
