import logging
from functools import wraps
from flask import abort
from flask_jwt_extended import verify_jwt_in_request
from rolewizard.services.policy import missing_permissions

logger = logging.getLogger(__name__)


def require_permissions(*codes: str):
    """Reject the request with 403 unless the token's ``perms`` claim holds every code."""
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            missing = missing_permissions(*codes)
            if missing:
                logger.info('denied %s: missing %s', fn.__name__, ','.join(missing))
                abort(403, description=f"Missing permission: {', '.join(missing)}")
            return fn(*args, **kwargs)
        return wrapper
    return outer
