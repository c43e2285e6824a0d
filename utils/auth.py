from functools import wraps

from flask import session, redirect, url_for, flash, g, request, jsonify, current_app

from models.users import User


def is_api_request():
    return (request.path or "").startswith("/api/")


def login_user(user):
    session.clear()
    session["user_id"] = str(user["_id"])
    session["user_name"] = User.full_name(user)
    session["user_role"] = user.get("role")


def load_current_user():
    """Attach the logged-in user document to ``g.user`` (or None)."""
    user_id = session.get("user_id")
    g.user = User.find_by_id(user_id) if user_id else None
    if user_id and g.user is None:
        # Account deleted while the session was alive
        session.clear()
    return g.user


def current_user():
    if "user" not in g:
        load_current_user()
    return g.user


# This decorator makes sure that only logged-in users can access protected pages
def login_required(view_function):
    @wraps(view_function)
    def decorated_function(*args, **kwargs):
        if current_user() is None:
            if is_api_request():
                return jsonify({"success": False, "error": "Unauthorized"}), 401
            flash("Please log in to access this page.", "warning")
            return redirect(url_for("auth.login"))
        return view_function(*args, **kwargs)
    return decorated_function


def role_required(*roles):
    """Allow only the given roles. Admins pass every role check."""
    allowed = set(roles)

    def decorator(view_function):
        @wraps(view_function)
        @login_required
        def decorated_function(*args, **kwargs):
            role = current_user().get("role")
            if role != "admin" and role not in allowed:
                current_app.logger.warning(
                    "Access denied: user %s (%s) -> %s", session.get("user_id"), role, request.path
                )
                if is_api_request():
                    return jsonify({"success": False, "error": "Forbidden"}), 403
                flash("You do not have access to that page.", "danger")
                return redirect(url_for("dashboard.index"))
            return view_function(*args, **kwargs)
        return decorated_function
    return decorator


def is_logged_in():
    return "user_id" in session


def logout_user():
    session.clear()
    flash("You have been logged out successfully.", "success")
    return redirect(url_for("auth.login"))
