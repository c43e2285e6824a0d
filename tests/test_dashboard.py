from datetime import timedelta

from models import AttendanceRecord, User
from utils.dashboard import instructor_overview, student_overview, students_with_today_status
from utils.dates import utcnow


def test_today_status_uses_latest_record(app, make_user):
    ada = make_user(first_name="Ada", last_name="Lovelace")
    alan = make_user(first_name="Alan", last_name="Turing")
    now = utcnow().replace(hour=12, minute=0, second=0, microsecond=0)
    AttendanceRecord(ada["_id"], "Late", timestamp=now - timedelta(hours=2)).save()
    AttendanceRecord(ada["_id"], "Present", timestamp=now - timedelta(hours=1)).save()
    AttendanceRecord(alan["_id"], "Present", timestamp=now - timedelta(days=1)).save()

    statuses = {s["name"]: s["attendance_status"] for s in students_with_today_status(now)}
    assert statuses == {"Ada Lovelace": "Present", "Alan Turing": "Absent"}


def test_instructor_overview(app, make_user):
    now = utcnow().replace(hour=12, minute=0, second=0, microsecond=0)
    students = [make_user(first_name=name, last_name="X") for name in ("Ann", "Bob", "Cat", "Dan")]
    AttendanceRecord(students[0]["_id"], "Present", timestamp=now).save()
    AttendanceRecord(students[1]["_id"], "Late", timestamp=now).save()
    AttendanceRecord(students[2]["_id"], "Present", timestamp=now - timedelta(days=1)).save()

    overview = instructor_overview(now)

    assert overview["total_students"] == 4
    assert (overview["present"], overview["late"], overview["absent"]) == (1, 1, 2)
    assert overview["attendance_percentage"] == 25
    assert len(overview["labels"]) == 7
    assert overview["labels"][-1] == now.strftime("%d %b")
    assert overview["present_data"][-2:] == [1, 2]
    assert overview["absent_data"][-2:] == [3, 2]


def test_instructor_overview_without_students(app):
    overview = instructor_overview()
    assert overview["total_students"] == 0
    assert overview["attendance_percentage"] == 0
    assert overview["absent_data"] == [0] * 7


def test_student_overview(app, make_user):
    student = make_user()
    assert student_overview(student["_id"])["status_text"] == "No recent attendance."

    now = utcnow()
    for i in range(7):
        AttendanceRecord(student["_id"], "Present", timestamp=now - timedelta(days=i + 1)).save()
    AttendanceRecord(student["_id"], "Late", timestamp=now).save()

    overview = student_overview(student["_id"])
    assert len(overview["history"]) == 5
    assert overview["latest"]["status"] == "Late"
    assert overview["status_text"] == "You were marked Late."
    assert overview["status_badge"] == "warning"


def test_trend_ignores_users_who_are_no_longer_students(app, make_user):
    now = utcnow().replace(hour=12, minute=0, second=0, microsecond=0)
    ann = make_user(first_name="Ann", last_name="X")
    bob = make_user(first_name="Bob", last_name="X")
    AttendanceRecord(ann["_id"], "Present", timestamp=now).save()
    AttendanceRecord(bob["_id"], "Present", timestamp=now).save()
    User.set_role(str(bob["_id"]), "instructor")

    overview = instructor_overview(now)

    assert overview["total_students"] == 1
    assert overview["present_data"][-1] == 1
    assert overview["absent_data"][-1] == 0
    assert all(p <= overview["total_students"] for p in overview["present_data"])
