import os
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker
from dotenv import load_dotenv

from inheritance import RecordMixin

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite+pysqlite:///:memory:"

TEST_DATABASE_URL: Optional[str] = os.getenv("TEST_DATABASE_URL")
DATABASE_URL: str = os.getenv("DATABASE_URL") or TEST_DATABASE_URL or DEFAULT_DATABASE_URL

connect_args = {}
if DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False

engine = create_engine(DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class Base(RecordMixin, DeclarativeBase):
    """SQLAlchemy declarative base with inheritance-aware records."""


def get_db():
    """Yield a session and close it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
