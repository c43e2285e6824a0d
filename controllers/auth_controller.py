from flask import Blueprint, render_template, request, redirect, url_for, flash, abort

from models.users import User
from utils.actions import handle_signup
from utils.auth import login_user, logout_user, login_required, current_user, is_logged_in

auth_bp = Blueprint("auth", __name__)

SIGNUP_ROLES = ("student", "instructor")


# Login
@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    if is_logged_in() and current_user():
        return redirect(url_for("dashboard.index"))

    if request.method == "POST":
        email = request.form.get("email")
        password = request.form.get("password")

        user = User.verify_password(email, password)
        if not user:
            flash("Invalid email or password. Please try again.", "danger")
            return redirect(url_for("auth.login"))

        if not user.get("role"):
            flash("Your user profile is missing a role. Please contact support.", "danger")
            return redirect(url_for("auth.login"))

        login_user(user)
        flash(f"Welcome {User.full_name(user)}!", "success")
        return redirect(url_for("dashboard.index"))

    return render_template("auth/login.html")


# Logout
@auth_bp.route("/logout")
def logout():
    return logout_user()


# Signup: choose a role first
@auth_bp.route("/signup")
def signup():
    return render_template("auth/signup.html")


@auth_bp.route("/signup/<role>", methods=["GET", "POST"])
def signup_role(role):
    if role not in SIGNUP_ROLES:
        abort(404)

    if request.method == "POST":
        result = handle_signup(
            request.form.get("first_name", "").strip(),
            request.form.get("last_name", "").strip(),
            request.form.get("email", "").strip(),
            request.form.get("password", ""),
            role,
        )
        if not result["success"]:
            flash(result["error"], "danger")
            return redirect(url_for("auth.signup_role", role=role))

        login_user(User.find_by_id(result["user_id"]))
        flash("Account created!", "success")
        if role == "student":
            return redirect(url_for("auth.settings"))
        return redirect(url_for("dashboard.index"))

    return render_template("auth/signup_form.html", role=role)


# View Profile
@auth_bp.route("/profile")
@login_required
def view_profile():
    return render_template("auth/profile.html", user=current_user())


# Settings (face registration lives here)
@auth_bp.route("/settings")
@login_required
def settings():
    user = current_user()
    return render_template(
        "auth/settings.html",
        user=user,
        has_registered_face=User.has_face_template(user),
    )
