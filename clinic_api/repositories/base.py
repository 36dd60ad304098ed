from contextlib import contextmanager
import logging

from sqlalchemy.exc import InterfaceError, OperationalError

from ..scheduling.ports import StoreUnavailableError

logger = logging.getLogger(__name__)

@contextmanager
def store_errors(operation: str):
    """Re-raise connectivity failures as StoreUnavailableError."""
    try:
        yield
    except (OperationalError, InterfaceError) as e:
        logger.error(f"Store unavailable during {operation}: {str(e)}")
        raise StoreUnavailableError(f"Store unavailable during {operation}") from e
