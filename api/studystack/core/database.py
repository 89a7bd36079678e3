from sqlmodel import SQLModel, create_engine, Session
from sqlalchemy.exc import SQLAlchemyError
from studystack.core.config import settings
from studystack.core.exceptions import PersistenceError
import logging

logger = logging.getLogger(__name__)


def normalize_database_url(db_url: str) -> str:
    """SQLAlchemy expects postgresql:// rather than postgres://."""
    if db_url.startswith("postgres://"):
        return db_url.replace("postgres://", "postgresql://", 1)
    return db_url


db_url = normalize_database_url(settings.database_url)

logger.info(f"Connecting to database: {db_url[:20]}...")  # Log partial URL for debugging

if db_url.startswith("sqlite"):
    engine = create_engine(
        db_url,
        echo=False,
        connect_args={"check_same_thread": False},
    )
else:
    engine = create_engine(
        db_url,
        echo=False,
        pool_pre_ping=True,  # Verify connections before using
        pool_size=5,
        max_overflow=10,
    )


def get_session():
    """Dependency for getting database sessions."""
    with Session(engine) as session:
        yield session


def init_db():
    """Initialize database tables."""
    # Tables are registered on SQLModel.metadata by importing the models
    from studystack import models  # noqa: F401
    SQLModel.metadata.create_all(engine)


def commit_or_raise(session: Session, action: str, *instances) -> None:
    """
    Commit the session's unit of work, rolling back on failure, then reload
    `instances` so their state reflects what was stored.
    
    Args:
        session: Database session
        action: Short description used in logs and the error message (e.g. 'rename module')
        instances: Objects to refresh after the commit
        
    Raises:
        PersistenceError: If the commit or the reload fails
    """
    try:
        session.commit()
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {str(e)}")
        raise PersistenceError(f"Failed to {action}") from e
    for instance in instances:
        try:
            session.refresh(instance)
        except SQLAlchemyError as e:
            logger.error(f"Failed to reload after {action}: {str(e)}")
            raise PersistenceError(f"Failed to {action}") from e


def _read_or_raise(session: Session, statement, action: str, first: bool):
    try:
        result = session.exec(statement)
        return result.first() if first else list(result.all())
    except SQLAlchemyError as e:
        session.rollback()
        logger.error(f"Failed to {action}: {str(e)}")
        raise PersistenceError(f"Failed to {action}") from e


def fetch_all(session: Session, statement, action: str) -> list:
    """Run a select and return every row, raising PersistenceError on storage failure."""
    return _read_or_raise(session, statement, action, first=False)


def fetch_first(session: Session, statement, action: str):
    """Run a select and return the first row or None, raising PersistenceError on storage failure."""
    return _read_or_raise(session, statement, action, first=True)
