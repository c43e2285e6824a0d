from flask import Blueprint, render_template, request, redirect, url_for, flash

from models import ClassSession, Course
from utils.actions import handle_create_class_session, handle_create_course
from utils.auth import login_required, role_required, current_user
from utils.dates import parse_datetime_local

timetable_bp = Blueprint("timetable", __name__, url_prefix="/timetable")


def _with_course_names(sessions, courses):
    names = {str(c["_id"]): c["name"] for c in courses}
    for s in sessions:
        s["course_name"] = names.get(s["course_id"], "Unknown Course")
    return sessions


# ==========================================================
# INSTRUCTOR TIMETABLE
# ==========================================================
@timetable_bp.route("/")
@role_required("instructor")
def index():
    courses = Course.for_instructor(current_user()["_id"])
    sessions = ClassSession.upcoming([c["_id"] for c in courses])
    return render_template(
        "instructor/timetable.html",
        courses=courses,
        sessions=_with_course_names(sessions, courses),
    )


@timetable_bp.route("/sessions", methods=["POST"])
@role_required("instructor")
def create_session():
    user = current_user()
    try:
        start_time = parse_datetime_local(request.form.get("start_time", ""))
        end_time = parse_datetime_local(request.form.get("end_time", ""))
    except ValueError:
        flash("Please select a start and end time.", "danger")
        return redirect(url_for("timetable.index"))

    result = handle_create_class_session(
        request.form.get("course_id"),
        start_time,
        end_time,
        instructor_id=None if user.get("role") == "admin" else str(user["_id"]),
    )
    if result["success"]:
        flash("Class Session Created! The new session has been added to the timetable.", "success")
    else:
        flash(result["error"], "danger")
    return redirect(url_for("timetable.index"))


@timetable_bp.route("/courses", methods=["POST"])
@role_required("instructor")
def create_course():
    result = handle_create_course(
        str(current_user()["_id"]),
        request.form.get("name"),
        request.form.get("description"),
    )
    if result["success"]:
        flash("Course created.", "success")
    else:
        flash(result["error"], "danger")
    return redirect(url_for("timetable.index"))


# ==========================================================
# STUDENT TIMETABLE (every course, upcoming sessions)
# ==========================================================
@timetable_bp.route("/student")
@login_required
def student_timetable():
    courses = Course.all_courses()
    sessions = ClassSession.upcoming([c["_id"] for c in courses])
    return render_template("student/timetable.html", sessions=_with_course_names(sessions, courses))
