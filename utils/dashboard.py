"""
Dashboard aggregation: plain queries plus in-memory filtering.
"""

from datetime import timedelta

from models import AttendanceRecord, User
from utils.dates import day_bounds, local_date, utcnow

PRESENT_STATUSES = ("Present", "Late")

STATUS_INFO = {
    "Present": {"text": "You were marked Present.", "badge": "success"},
    "Late": {"text": "You were marked Late.", "badge": "warning"},
    "Absent": {"text": "You were marked Absent.", "badge": "danger"},
}
NO_STATUS = {"text": "No recent attendance.", "badge": "secondary"}


def _statuses_on(day):
    """Latest status per student for one day."""
    start, end = day_bounds(day)
    statuses = {}
    for rec in AttendanceRecord.between(start, end):
        statuses[rec["student_id"]] = rec["status"]
    return statuses


def students_with_today_status(now=None):
    now = now or utcnow()
    today = _statuses_on(local_date(now))

    students = []
    for student in User.list_students():
        sid = str(student["_id"])
        students.append({
            "id": sid,
            "name": User.full_name(student),
            "email": student.get("email"),
            "avatar": student.get("face_template"),
            "has_face": User.has_face_template(student),
            "attendance_status": today.get(sid, "Absent"),
        })
    return students


def instructor_overview(now=None, days=7):
    now = now or utcnow()
    students = students_with_today_status(now)
    total = len(students)
    student_ids = {s["id"] for s in students}

    present = sum(1 for s in students if s["attendance_status"] == "Present")
    late = sum(1 for s in students if s["attendance_status"] == "Late")
    absent = sum(1 for s in students if s["attendance_status"] == "Absent")
    percentage = round(present / total * 100) if total else 0

    # Last N days, oldest first
    labels, present_data, absent_data = [], [], []
    for i in range(days - 1, -1, -1):
        day = local_date(now) - timedelta(days=i)
        statuses = _statuses_on(day)
        day_present = sum(
            1 for sid, status in statuses.items()
            if sid in student_ids and status in PRESENT_STATUSES
        )

        labels.append(day.strftime("%d %b"))
        present_data.append(day_present)
        absent_data.append(total - day_present)

    return {
        "students": students,
        "total_students": total,
        "present": present,
        "late": late,
        "absent": absent,
        "attendance_percentage": percentage,
        "labels": labels,
        "present_data": present_data,
        "absent_data": absent_data,
    }


def student_overview(student_id, limit=5):
    history = AttendanceRecord.for_student(student_id, limit=limit)
    latest = history[0] if history else None
    info = STATUS_INFO.get(latest["status"], NO_STATUS) if latest else NO_STATUS
    return {
        "latest": latest,
        "history": history,
        "status_text": info["text"],
        "status_badge": info["badge"],
    }
