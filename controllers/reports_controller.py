from flask import Blueprint, render_template, request, flash

from models import Course
from utils.actions import handle_generate_report
from utils.auth import role_required, current_user
from utils.dates import parse_date

reports_bp = Blueprint("reports", __name__, url_prefix="/reports")


@reports_bp.route("/", methods=["GET", "POST"])
@role_required("instructor")
def index():
    courses = Course.for_instructor(current_user()["_id"])
    report = None
    course_name = None

    if request.method == "POST":
        try:
            date_from = parse_date(request.form.get("date_from", ""))
            date_to = parse_date(request.form.get("date_to", ""))
        except ValueError:
            flash("Please select a date range.", "danger")
            return render_template("instructor/reports.html", courses=courses, report=None, form=request.form)

        result = handle_generate_report(request.form.get("course_id"), date_from, date_to)
        if result["success"]:
            report = result["report"]
            course_name = result["course_name"]
            if not report:
                flash("There is no attendance data for the selected course and date range.", "info")
        else:
            flash(result["error"], "danger")

    return render_template(
        "instructor/reports.html",
        courses=courses,
        report=report,
        course_name=course_name,
        form=request.form,
    )
