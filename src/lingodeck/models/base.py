"""Base model configuration."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

# Create declarative base class
Base = declarative_base()


def create_db_engine(url: str, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for the given database URL."""
    return create_engine(url, echo=echo)


def create_session_factory(engine: Engine) -> sessionmaker:
    """Create a session factory bound to the engine."""
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Initialize database."""
    Base.metadata.create_all(bind=engine)  # Create tables if they don't exist
