"""Error boundary shared by the inventory services."""

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from gasstock.config import get_logger
from gasstock.core.exceptions import InternalError, InventoryError

logger = get_logger(__name__)


@contextmanager
def unexpected_errors(operation: str, **context: Any) -> Iterator[None]:
    """
    Let domain errors through and turn anything else into InternalError.

    The original exception is logged and chained, never put in the message.
    """
    try:
        yield
    except InventoryError:
        raise
    except Exception as e:
        logger.error(
            "inventory_operation_failed",
            operation=operation,
            error=str(e),
            error_type=type(e).__name__,
            **context,
        )
        raise InternalError(f"Failed to {operation}") from e
