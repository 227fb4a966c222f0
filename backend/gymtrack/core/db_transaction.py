from contextlib import contextmanager
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError
from gymtrack.core.database import SessionLocal
from gymtrack.core.exceptions import ConflictError, InternalError
from gymtrack.core.logging_config import get_logger

logger = get_logger("db_transaction")


@contextmanager
def db_transaction(db: Session = None, operation_name: str = "operation"):
    """Commit on success, roll back on any failure.

    Domain errors propagate unchanged. A versioned row changed by another
    request since it was read becomes ConflictError; other storage errors
    are logged and re-raised as InternalError so no driver detail reaches
    the caller.
    """
    if db is None:
        db = SessionLocal()
        should_close = True
    else:
        should_close = False
    try:
        yield db
        db.commit()
    except StaleDataError as e:
        db.rollback()
        logger.warning(f"{operation_name} rolled back on concurrent modification: {str(e)}")
        raise ConflictError(
            "The record was modified by another request. Please reload and try again."
        ) from e
    except SQLAlchemyError as e:
        db.rollback()
        logger.error(f"{operation_name} rolled back: {str(e)}", exc_info=True)
        raise InternalError(f"Storage failure during {operation_name}") from e
    except Exception:
        db.rollback()
        raise
    finally:
        if should_close:
            db.close()
