"""
Database helpers shared by the service layer.

translate_db_errors wraps a write-path entry point so that driver-level
timeouts and dropped connections surface as TransientError instead of a 500.
Statement and lock timeouts themselves are configured on the connection
(see DATABASES["default"]["OPTIONS"] in settings/base.py).
"""

import functools
import logging

from django.db import OperationalError

from core.exceptions import TransientError

logger = logging.getLogger(__name__)


def translate_db_errors(func):
    """Re-raise OperationalError from ``func`` as a retryable TransientError."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except OperationalError as exc:
            logger.warning("Transient database failure in %s: %s", func.__qualname__, exc)
            raise TransientError() from exc

    return wrapper
