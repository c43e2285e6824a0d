from flask import Blueprint, render_template, request, redirect, url_for, flash

from models import Course, Mark, User
from utils.actions import handle_add_mark
from utils.auth import login_required, role_required, current_user

marks_bp = Blueprint("marks", __name__, url_prefix="/marks")


@marks_bp.route("/")
@login_required
def index():
    user = current_user()
    courses_by_id = {str(c["_id"]): c for c in Course.all_courses()}

    if user.get("role") == "student":
        marks = Mark.for_student(str(user["_id"]))
        for m in marks:
            course = courses_by_id.get(m["course_id"])
            m["course_name"] = course["name"] if course else "Unknown Course"
        return render_template("student/marks.html", marks=marks)

    courses = Course.for_instructor(user["_id"])
    students = User.list_students()
    names = {str(s["_id"]): User.full_name(s) for s in students}

    # Only marks within the instructor's own courses
    recent_marks = Mark.for_courses([c["_id"] for c in courses], limit=20)
    for m in recent_marks:
        m["student_name"] = names.get(m["student_id"], "Unknown Student")
        course = courses_by_id.get(m["course_id"])
        m["course_name"] = course["name"] if course else "Unknown Course"

    return render_template(
        "instructor/marks.html",
        courses=courses,
        students=students,
        recent_marks=recent_marks,
    )


@marks_bp.route("/add", methods=["POST"])
@role_required("instructor")
def add_mark():
    user = current_user()
    result = handle_add_mark(
        request.form.get("student_id"),
        request.form.get("course_id"),
        request.form.get("assignment_name"),
        request.form.get("score"),
        request.form.get("total_score"),
        instructor_id=None if user.get("role") == "admin" else str(user["_id"]),
    )
    if result["success"]:
        flash("Mark Added! The new mark has been successfully recorded.", "success")
    else:
        flash(result["error"], "danger")
    return redirect(url_for("marks.index"))
