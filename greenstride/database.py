# greenstride/database.py
import time
from functools import wraps

from flask import current_app
from sqlalchemy.exc import OperationalError

from . import db


def db_retry(fn):
    """
    Retry ``fn`` when the database connection drops mid-call.

    The session is rolled back between attempts. After the last attempt
    the OperationalError propagates and is reported as a 503.
    """

    @wraps(fn)
    def wrapper(*args, **kwargs):
        attempts = max(1, int(current_app.config.get("DB_RETRY_ATTEMPTS", 3)))
        backoff = float(current_app.config.get("DB_RETRY_BACKOFF_SECONDS", 0.2))

        for attempt in range(1, attempts + 1):
            try:
                return fn(*args, **kwargs)
            except OperationalError as e:
                db.session.rollback()
                if attempt == attempts:
                    raise
                current_app.logger.warning(
                    f"[db] {fn.__name__} failed (attempt {attempt}/{attempts}): {e.orig}"
                )
                if backoff:
                    time.sleep(backoff * attempt)

    return wrapper
