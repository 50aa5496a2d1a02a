from __future__ import annotations

from functools import wraps

from flask import jsonify, session

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def current_employee_id() -> int:
    return int(session["user_id"])


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if "user_id" not in session:
            return jsonify({"message": "Not authenticated"}), 401
        return view(*args, **kwargs)

    return wrapper


def roles_required(*roles: Role):
    allowed = {r.value for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            if "user_id" not in session:
                return jsonify({"message": "Not authenticated"}), 401
            if session.get("role") not in allowed:
                raise AuthorizationError("Access denied")
            return view(*args, **kwargs)

        return wrapper

    return decorator


REPORTING_ROLES = (Role.ADMIN, Role.MANAGER, Role.PAYROLL_OFFICER)
