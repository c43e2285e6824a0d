"""
utils/actions.py
---------------------------------
Server actions behind the pages and JSON endpoints.

Every action returns a plain dict: ``{"success": True, ...}`` on success or
``{"success": False, "error": "<message>"}`` on failure, plus
``"internal": True`` when the failure was unexpected. Errors are caught here,
logged, and turned into a message the UI can show as-is. There is no
retry; the caller decides whether to try again.
"""

import json
import logging
from functools import wraps

from flask import current_app
from pydantic import ValidationError as SchemaError

from ai import flows
from ai.schemas import AbsenceJustificationInput
from models import AttendanceRecord, ClassSession, Course, Mark, User
from models.attendance import STATUSES
from models.users import ROLES
from utils.dates import day_bounds, local_date, to_local, utcnow
from utils.errors import AttendXError, ValidationError
from utils.images import normalize_data_uri

logger = logging.getLogger(__name__)

HISTORY_LIMIT = 30


def server_action(default_error):
    """Catch everything at the action boundary and return an error dict."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            try:
                return func(*args, **kwargs)
            except AttendXError as e:
                logger.warning("[%s] %s", func.__name__, e)
                return {"success": False, "error": str(e)}
            except Exception:
                logger.exception("[%s] unexpected failure", func.__name__)
                return {"success": False, "error": default_error, "internal": True}
        return wrapper
    return decorator


def http_status(result):
    """Status code for an action result sent back as JSON."""
    if result.get("success"):
        return 200
    return 500 if result.get("internal") else 400


def _max_image_side():
    return current_app.config.get("MAX_IMAGE_SIDE", 1024)


def _require_student(student_id):
    student = User.find_by_id(student_id)
    if not student or student.get("role") != "student":
        raise ValidationError("Student not found.")
    return student


def _require_course(course_id, instructor_id=None):
    course = Course.find_by_id(course_id)
    if not course:
        raise ValidationError("Course not found.")
    if instructor_id is not None and course.get("instructor_id") != str(instructor_id):
        raise ValidationError("You can only manage your own courses.")
    return course


def record_attendance(student_id, status="Present", marked_by="verification", now=None):
    """Append one attendance record, tied to the session running now (if any)."""
    now = now or utcnow()
    session = ClassSession.current(now)
    record = AttendanceRecord(
        student_id=student_id,
        status=status,
        class_session_id=session["_id"] if session else None,
        course_id=session["course_id"] if session else None,
        timestamp=now,
        marked_by=marked_by,
    )
    result = record.save()
    logger.info("[ATTENDANCE] %s marked %s (%s)", student_id, status, marked_by)
    return result.inserted_id


# ============================
# FACE FLOWS
# ============================
@server_action("Failed to analyze the photo.")
def handle_detect_face(photo_data_uri):
    photo = normalize_data_uri(photo_data_uri, _max_image_side())
    result = flows.detect_face(photo)
    return {"success": True, "face_detected": result.face_detected}


@server_action("Could not register your face. Please try again.")
def handle_register_face(photo_data_uri, user_id):
    user = User.find_by_id(user_id)
    if not user:
        raise ValidationError("User not found.")
    if User.has_face_template(user):
        raise ValidationError("You have already registered your face.")

    template = normalize_data_uri(photo_data_uri, _max_image_side())
    result = flows.register_face(template)
    if not result.face_registered:
        raise ValidationError(
            "No clear face detected. Make sure a single face is visible and facing the camera."
        )

    User.set_face_template(user_id, template)
    logger.info("[FACE] Template registered for %s", user_id)
    return {"success": True}


@server_action("Verification failed. Please try again.")
def handle_verify_and_mark_attendance(photo_data_uri, user_id):
    user = User.find_by_id(user_id)
    if not user:
        raise ValidationError("User not found.")
    if not User.has_face_template(user):
        raise ValidationError("You need to register your face before you can mark attendance.")

    photo = normalize_data_uri(photo_data_uri, _max_image_side())
    result = flows.verify_student_face(photo, user["face_template"])
    if not result.is_match:
        raise ValidationError("Face does not match your registered face. Please try again.")

    record_id = record_attendance(user_id, "Present", marked_by="verification")
    return {"success": True, "status": "Present", "record_id": str(record_id)}


@server_action("Could not recognize a student or mark attendance. Please try again.")
def handle_recognize_and_mark_attendance(photo_data_uri):
    students = User.list_students(with_face_template=True)
    if not students:
        raise ValidationError("No students have registered a face yet.")

    directory = {
        str(s["_id"]): {
            "student_id": str(s["_id"]),
            "name": User.full_name(s),
            "face_template": s["face_template"],
        }
        for s in students
    }

    photo = normalize_data_uri(photo_data_uri, _max_image_side())
    result = flows.recognize_student_face(photo, list(directory.values()))

    student_id = (result.recognized_student_id or "").strip()
    if student_id not in directory:
        # Empty or an id the model made up
        raise ValidationError("No registered student was recognized in the photo.")

    record_attendance(student_id, "Present", marked_by="recognition")
    return {
        "success": True,
        "student_id": student_id,
        "student_name": directory[student_id]["name"],
    }


# ============================
# TEXT FLOWS
# ============================
def build_trend_records(course_id=None, now=None):
    """JSON-ready list of students with today's status and recent history."""
    now = now or utcnow()
    start, end = day_bounds(local_date(now))

    today = {}
    for rec in AttendanceRecord.between(start, end):
        if course_id and rec.get("course_id") != str(course_id):
            continue
        today[rec["student_id"]] = rec["status"]

    rows = []
    for student in User.list_students():
        sid = str(student["_id"])
        history = [
            {"date": to_local(rec["timestamp"]).strftime("%Y-%m-%d"), "status": rec["status"]}
            for rec in AttendanceRecord.for_student(sid, limit=HISTORY_LIMIT)
            if not course_id or rec.get("course_id") == str(course_id)
        ]
        rows.append({
            "name": User.full_name(student),
            "status": today.get(sid, "Absent"),
            "history": history,
        })
    return rows


@server_action("Failed to summarize trends.")
def handle_summarize_trends(course_id=None):
    course_name = "All courses"
    if course_id:
        course_name = _require_course(course_id)["name"]

    records = build_trend_records(course_id)
    if not records:
        raise ValidationError("There are no students to summarize yet.")

    result = flows.summarize_attendance_trends(course_name, json.dumps(records))
    return {"success": True, "summary": result.summary}


@server_action("Failed to generate justification.")
def handle_generate_justification(data):
    try:
        payload = AbsenceJustificationInput(**data)
    except SchemaError:
        raise ValidationError("Please provide the student, professor, course and a reason for the absence.")

    result = flows.generate_absence_justification(**payload.model_dump())
    return {"success": True, "email_draft": result.email_draft}


# ============================
# REPORTS
# ============================
@server_action("Failed to generate report.")
def handle_generate_report(course_id, date_from, date_to):
    course = _require_course(course_id)
    if not date_from or not date_to:
        raise ValidationError("Please select a date range.")
    if date_to < date_from:
        raise ValidationError("The end date must be on or after the start date.")

    start, _ = day_bounds(date_from)
    _, end = day_bounds(date_to)

    sessions = ClassSession.in_range(course_id, start, end)
    students = User.list_students()

    # First record wins when a student was marked more than once for a session
    statuses = {}
    for rec in AttendanceRecord.for_sessions([s["_id"] for s in sessions]):
        statuses.setdefault((rec["class_session_id"], rec["student_id"]), rec["status"])

    report = []
    for session in sessions:
        session_id = str(session["_id"])
        for student in students:
            sid = str(student["_id"])
            report.append({
                "session_id": session_id,
                "student_id": sid,
                "student_name": User.full_name(student),
                "date": to_local(session["start_time"]).strftime("%Y-%m-%d"),
                "status": statuses.get((session_id, sid), "Absent"),
            })

    report.sort(key=lambda row: (row["date"], row["student_name"]))
    return {"success": True, "report": report, "course_name": course["name"]}


# ============================
# MARKS / TIMETABLE / COURSES
# ============================
@server_action("Failed to add mark.")
def handle_add_mark(student_id, course_id, assignment_name, score, total_score, instructor_id=None):
    assignment_name = (assignment_name or "").strip()
    if not assignment_name:
        raise ValidationError("Please enter an assignment name.")
    try:
        score = float(score)
        total_score = float(total_score)
    except (TypeError, ValueError):
        raise ValidationError("Score and total score must be numbers.")
    if score < 0:
        raise ValidationError("Score cannot be negative.")
    if total_score < 1:
        raise ValidationError("Total score must be at least 1.")

    _require_student(student_id)
    _require_course(course_id, instructor_id)

    result = Mark(student_id, course_id, assignment_name, score, total_score).save()
    logger.info("[MARKS] %s: %s/%s for %s", assignment_name, score, total_score, student_id)
    return {"success": True, "mark_id": str(result.inserted_id)}


@server_action("Failed to create class session.")
def handle_create_class_session(course_id, start_time, end_time, instructor_id=None):
    if not start_time or not end_time:
        raise ValidationError("Please select a start and end time.")
    if end_time <= start_time:
        raise ValidationError("End time must be after start time.")
    _require_course(course_id, instructor_id)

    result = ClassSession(course_id, start_time, end_time).save()
    return {"success": True, "session_id": str(result.inserted_id)}


@server_action("Failed to create course.")
def handle_create_course(instructor_id, name, description=None):
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a course name.")
    result = Course(name, instructor_id, description).save()
    return {"success": True, "course_id": str(result.inserted_id)}


# ============================
# USERS
# ============================
@server_action("Failed to create account.")
def handle_signup(first_name, last_name, email, password, role):
    if role not in ("student", "instructor"):
        raise ValidationError("Please choose a valid role.")
    if not all([first_name, last_name, email, password]):
        raise ValidationError("First name, last name, email and password are required.")
    if len(password) < 6:
        raise ValidationError("Password must be at least 6 characters.")
    if User.find_by_email(email):
        raise ValidationError("Email already registered!")

    result = User(first_name, last_name, email, password, role=role).save()
    return {"success": True, "user_id": str(result.inserted_id)}


@server_action("An unknown error occurred.")
def handle_set_role(uid, role):
    if not uid or not role:
        raise ValidationError("uid and role are required")
    if role not in ROLES:
        raise ValidationError("Invalid role specified")
    if not User.find_by_id(uid):
        raise ValidationError("User not found.")

    User.set_role(uid, role)
    return {"success": True, "message": f"Role set for user {uid}"}


@server_action("Failed to record attendance.")
def handle_manual_mark(student_id, status):
    if status not in STATUSES:
        raise ValidationError("Invalid attendance status.")
    _require_student(student_id)
    record_id = record_attendance(student_id, status, marked_by="manual")
    return {"success": True, "record_id": str(record_id)}
