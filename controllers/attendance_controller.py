from flask import Blueprint, render_template, request, jsonify, current_app

from models import AttendanceRecord, User
from utils.actions import (
    handle_detect_face,
    handle_register_face,
    handle_verify_and_mark_attendance,
    handle_recognize_and_mark_attendance,
    http_status,
)
from utils.auth import login_required, role_required, current_user
from utils.errors import InvalidImageError
from utils.images import file_to_data_uri

attendance_bp = Blueprint("attendance", __name__)


def _photo_from_request():
    """Photo from a JSON body (``photo_data_uri``) or an uploaded file (``photo``)."""
    if request.is_json:
        return (request.get_json(silent=True) or {}).get("photo_data_uri")
    upload = request.files.get("photo")
    if upload:
        return file_to_data_uri(upload)
    return request.form.get("photo_data_uri")


def _json_result(result):
    return jsonify(result), http_status(result)


def _run_with_photo(action, *args):
    try:
        photo = _photo_from_request()
    except InvalidImageError as e:
        return _json_result({"success": False, "error": str(e)})
    if not photo:
        return _json_result({"success": False, "error": "No photo was provided."})
    return _json_result(action(photo, *args))


# ==========================================================
# ATTENDANCE PAGE (instructor scanner / student check-in)
# ==========================================================
@attendance_bp.route("/attendance")
@login_required
def attendance_page():
    user = current_user()
    scan = {
        "interval_ms": int(current_app.config["SCAN_INTERVAL_SECONDS"] * 1000),
        "reset_ms": int(current_app.config["SCAN_RESET_SECONDS"] * 1000),
    }

    if user.get("role") in ("instructor", "admin"):
        return render_template("instructor/attendance.html", scan=scan)

    can_mark, last_record = AttendanceRecord.can_mark_again(
        str(user["_id"]), cooldown_hours=current_app.config["CHECKIN_COOLDOWN_HOURS"]
    )
    return render_template(
        "student/attendance.html",
        scan=scan,
        has_registered_face=User.has_face_template(user),
        can_mark=can_mark,
        last_record=last_record,
    )


# ==========================================================
# JSON ENDPOINTS
# ==========================================================
@attendance_bp.route("/api/attendance/detect", methods=["POST"])
@login_required
def detect():
    return _run_with_photo(handle_detect_face)


@attendance_bp.route("/api/attendance/verify", methods=["POST"])
@role_required("student")
def verify():
    return _run_with_photo(handle_verify_and_mark_attendance, str(current_user()["_id"]))


@attendance_bp.route("/api/attendance/recognize", methods=["POST"])
@role_required("instructor")
def recognize():
    return _run_with_photo(handle_recognize_and_mark_attendance)


@attendance_bp.route("/api/face/register", methods=["POST"])
@login_required
def register_face():
    return _run_with_photo(handle_register_face, str(current_user()["_id"]))
