from flask import Blueprint, render_template, request

from models import Course
from utils.actions import handle_summarize_trends
from utils.auth import login_required, role_required, current_user
from utils.dashboard import instructor_overview, student_overview

dashboard_bp = Blueprint("dashboard", __name__)


def _render_instructor(summary=None, error=None, course_id=None):
    user = current_user()
    return render_template(
        "instructor/dashboard.html",
        overview=instructor_overview(),
        courses=Course.for_instructor(user["_id"]),
        selected_course=course_id,
        summary=summary,
        error=error,
    )


@dashboard_bp.route("/")
@login_required
def index():
    user = current_user()
    if user.get("role") == "student":
        return render_template(
            "student/dashboard.html",
            user=user,
            overview=student_overview(str(user["_id"])),
        )
    return _render_instructor()


# AI-powered insights
@dashboard_bp.route("/summarize", methods=["POST"])
@role_required("instructor")
def summarize():
    course_id = request.form.get("course_id") or None
    result = handle_summarize_trends(course_id)
    if result["success"]:
        return _render_instructor(summary=result["summary"], course_id=course_id)
    return _render_instructor(error=result["error"], course_id=course_id)
