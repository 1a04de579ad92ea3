from functools import wraps

from flask_login import current_user

from fleetbook.errors import UnauthorizedError


def principal_required(func):
    @wraps(func)
    def inner(*args, **kwargs):
        if not current_user.is_authenticated:
            raise UnauthorizedError("Sign in required.")
        return func(*args, **kwargs)

    return inner


def acting_account():
    """The account behind the current request, unwrapped from Flask-Login's proxy."""
    return current_user._get_current_object()
