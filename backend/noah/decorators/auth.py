from functools import wraps
from flask import abort
from flask_jwt_extended import verify_jwt_in_request, get_jwt
from noah.constants import roles
from noah.services.policy import can_view, load_permission_table


def require_module(module: str, *, allow_portal: bool = False):
    """Endpoint-level permission check: the inline access-denied panel of a staff page."""
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            role = get_jwt().get('role', '')
            if role in roles.PORTAL_ROLES:
                if not allow_portal:
                    abort(403, description='access denied')
                return fn(*args, **kwargs)
            from noah import get_db
            if not can_view(role, module, load_permission_table(get_db())):
                abort(403, description='access denied')
            return fn(*args, **kwargs)
        return wrapper
    return outer


def require_portal(*portal_roles: str):
    def outer(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            if get_jwt().get('role') not in (portal_roles or roles.PORTAL_ROLES):
                abort(403, description='portal access only')
            return fn(*args, **kwargs)
        return wrapper
    return outer
