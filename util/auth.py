from functools import wraps

from flask_login import current_user

from util.constant import ACTION_MIN_ROLE, ROLE
from util.exceptions import UnauthorizedError


def can_perform_action(user, action):
    if user is None or not user.is_authenticated:
        return False
    required = ACTION_MIN_ROLE.get(action)
    if required is None:
        return False
    return ROLE.parse(user.role).at_least(required)


def role_required(action):
    """Decorator: read = mọi role, write = editor trở lên, delete = admin."""

    def decorator(view):
        @wraps(view)
        def wrapped(*args, **kwargs):
            if not can_perform_action(current_user, action):
                raise UnauthorizedError()
            return view(*args, **kwargs)

        return wrapped

    return decorator


def current_actor_id():
    if current_user and current_user.is_authenticated:
        return current_user.id
    return None
