from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool


IN_MEMORY_DATABASE_URL = "sqlite://"

Base = declarative_base()


def build_engine() -> Engine:
    # Every engine is a private in-memory database that only lives as long as
    # its connection, so every session has to share the same one.
    return create_engine(
        IN_MEMORY_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


def build_session_factory(engine: Engine | None = None) -> sessionmaker:
    engine = engine or build_engine()
    Base.metadata.create_all(bind=engine)
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )
