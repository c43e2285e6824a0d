from flask import Flask, redirect, url_for, session, request, jsonify

from ai import init_ai
from config import Config
from utils.auth import load_current_user, is_api_request
from utils.dates import to_local
from utils.db import init_db_connection
from utils.logging_config import setup_logging

# Import controllers
from controllers.auth_controller import auth_bp
from controllers.dashboard_controller import dashboard_bp
from controllers.attendance_controller import attendance_bp
from controllers.students_controller import students_bp
from controllers.marks_controller import marks_bp
from controllers.timetable_controller import timetable_bp
from controllers.reports_controller import reports_bp
from controllers.api_controller import api_bp

PUBLIC_ENDPOINTS = {"auth.login", "auth.logout", "auth.signup", "auth.signup_role", "static"}


def create_app(config_object=Config):
    app = Flask(__name__)               # Initialize Flask app
    app.config.from_object(config_object)

    setup_logging(app)
    init_db_connection(app)             # Initialize MongoDB connection
    init_ai(app)                        # Gemini client (lazy)

    # Register Blueprint
    app.register_blueprint(auth_bp)
    app.register_blueprint(dashboard_bp)
    app.register_blueprint(attendance_bp)
    app.register_blueprint(students_bp)
    app.register_blueprint(marks_bp)
    app.register_blueprint(timetable_bp)
    app.register_blueprint(reports_bp)
    app.register_blueprint(api_bp)

    # Stored times are UTC; pages show the school's wall clock
    app.add_template_filter(to_local, "localtime")

    # Globally inject the logged-in user's name and role into all templates
    @app.context_processor
    def inject_user():
        return dict(user_name=session.get("user_name"), user_role=session.get("user_role"))

    # Block all routes except login/signup if not logged in
    @app.before_request
    def require_login():
        user = load_current_user()
        if user is None and request.endpoint not in PUBLIC_ENDPOINTS:
            if is_api_request():
                return jsonify({"success": False, "error": "Unauthorized"}), 401
            return redirect(url_for("auth.login"))
        return None

    app.logger.info("[STARTUP] AttendX ready")
    return app


# Run the app
if __name__ == "__main__":
    create_app().run(debug=True)
