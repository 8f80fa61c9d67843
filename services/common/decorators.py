from datetime import datetime
from fastapi.responses import PlainTextResponse
from fastapi.exceptions import HTTPException
from functools import wraps
from typing import Callable, Dict, Optional, Type
import logging

logger = logging.getLogger(__name__)

GENERIC_ERROR_BODY = "Internal Server Error"


# Decorator to turn handler failures into opaque responses
def error_responder(status_map: Optional[Dict[Type[Exception], int]] = None):
    """
    Wrap an async route handler so unexpected errors never leak to the caller.

    HTTPException passes through untouched. Exceptions listed in status_map are
    answered with their own status code and message; anything else is logged
    with its traceback and answered with a bare 500.
    """
    status_map = status_map or {}

    def decorator(func: Callable):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            start_at = datetime.now()
            try:
                return await func(*args, **kwargs)
            except HTTPException:
                raise
            except Exception as e:
                run_time = (datetime.now() - start_at).total_seconds()
                for exc_type, status_code in status_map.items():
                    if isinstance(e, exc_type):
                        logger.warning(f"{func.__name__} -> {status_code} after {run_time:.2f}s: {e}")
                        return PlainTextResponse(str(e), status_code=status_code)

                logger.exception(f"Error during {func.__name__} after {run_time:.2f}s: {e}")
                return PlainTextResponse(GENERIC_ERROR_BODY, status_code=500)

        return wrapper

    return decorator
