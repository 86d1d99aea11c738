from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

DEFAULT_DB_URL = "sqlite:///sepsis_screening.db"


def init_db(db_url: str = DEFAULT_DB_URL) -> sessionmaker:
    kwargs = {}
    if db_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        # one shared connection, otherwise each session sees an empty database
        if db_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    engine = create_engine(db_url, **kwargs)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)


def close_db(Session: sessionmaker) -> None:
    engine = Session.kw.get("bind")
    if engine is not None:
        engine.dispose()
