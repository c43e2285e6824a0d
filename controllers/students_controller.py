from flask import Blueprint, render_template, request, redirect, url_for, flash, abort, current_app

from models import AttendanceRecord, Course, User
from models.attendance import STATUSES
from utils.actions import handle_generate_justification, handle_manual_mark
from utils.auth import role_required, current_user
from utils.dashboard import students_with_today_status

students_bp = Blueprint("students", __name__, url_prefix="/students")


def _load_student(student_id):
    student = User.find_by_id(student_id)
    if not student or student.get("role") != "student":
        abort(404)
    return student


def _render_detail(student, email_draft=None, form=None):
    courses = Course.for_instructor(current_user()["_id"]) or Course.all_courses()
    return render_template(
        "instructor/student_detail.html",
        student=student,
        student_name=User.full_name(student),
        history=AttendanceRecord.for_student(str(student["_id"])),
        courses=courses,
        statuses=STATUSES,
        email_draft=email_draft,
        form=form or {},
    )


# -----------------------------
# VIEW STUDENTS (today's status)
# -----------------------------
@students_bp.route("/")
@role_required("instructor")
def list_students():
    return render_template("instructor/students.html", students=students_with_today_status())


@students_bp.route("/<student_id>")
@role_required("instructor")
def student_detail(student_id):
    return _render_detail(_load_student(student_id))


# -----------------------------
# ABSENCE EMAIL DRAFT
# -----------------------------
@students_bp.route("/<student_id>/justification", methods=["POST"])
@role_required("instructor")
def generate_justification(student_id):
    student = _load_student(student_id)

    course = Course.find_by_id(request.form.get("course_id")) if request.form.get("course_id") else None
    professor = User.find_by_id(course["instructor_id"]) if course else None

    result = handle_generate_justification({
        "student_name": User.full_name(student),
        "professor_name": User.full_name(professor) if professor else current_app.config["DEFAULT_PROFESSOR_NAME"],
        "course_name": course["name"] if course else "",
        "absence_reason": request.form.get("absence_reason", "").strip(),
        "additional_details": request.form.get("additional_details", "").strip() or None,
    })

    if not result["success"]:
        flash(result["error"], "danger")
        return _render_detail(student, form=request.form)
    return _render_detail(student, email_draft=result["email_draft"], form=request.form)


# -----------------------------
# MANUAL STATUS (Present / Late / Absent)
# -----------------------------
@students_bp.route("/<student_id>/mark", methods=["POST"])
@role_required("instructor")
def manual_mark(student_id):
    _load_student(student_id)
    result = handle_manual_mark(student_id, request.form.get("status"))
    if result["success"]:
        flash("Attendance recorded.", "success")
    else:
        flash(result["error"], "danger")
    return redirect(url_for("students.student_detail", student_id=student_id))
