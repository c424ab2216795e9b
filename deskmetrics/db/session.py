from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from deskmetrics.core.config import settings


def create_store_engine(url: str) -> Engine:
    """Engine for one store; every session reads in UTC."""
    connect_args = {}
    backend = make_url(url).get_backend_name()
    if backend.startswith("postgresql"):
        connect_args["options"] = "-c timezone=utc"
    elif backend == "sqlite":
        # Store calls run on worker threads
        connect_args["check_same_thread"] = False
    return create_engine(url, pool_pre_ping=True, connect_args=connect_args)


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


engine = create_store_engine(settings.DATABASE_URL)
SessionLocal = create_session_factory(engine)

conversations_engine = create_store_engine(settings.CONVERSATIONS_DATABASE_URL)
ConversationSessionLocal = create_session_factory(conversations_engine)
