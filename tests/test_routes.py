import base64
import io
from datetime import timedelta
from zoneinfo import ZoneInfo

from ai.schemas import DetectFaceOutput, RecognizeFaceOutput, RegisterFaceOutput, VerifyFaceOutput
from models import AttendanceRecord, ClassSession, Course, Mark, User
from utils.dates import to_local, utcnow


# -----------------------------
# auth gating
# -----------------------------
def test_pages_redirect_to_login(client):
    response = client.get("/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/login")


def test_api_requires_login(client, photo):
    response = client.post("/api/attendance/detect", json={"photo_data_uri": photo})
    assert response.status_code == 401
    assert response.get_json() == {"success": False, "error": "Unauthorized"}


def test_login_page_is_public(client):
    assert client.get("/login").status_code == 200
    assert client.get("/signup").status_code == 200
    assert client.get("/signup/student").status_code == 200
    assert client.get("/signup/admin").status_code == 404


def test_login_with_password(client, make_user):
    user = make_user(role="instructor", first_name="Grace", last_name="Hopper")

    bad = client.post("/login", data={"email": user["email"], "password": "nope"})
    assert bad.headers["Location"].endswith("/login")

    good = client.post("/login", data={"email": user["email"], "password": "secret1"})
    assert good.status_code == 302
    page = client.get("/")
    assert page.status_code == 200
    assert b"Grace Hopper" in page.data


def test_signup_creates_student_and_goes_to_settings(client):
    response = client.post("/signup/student", data={
        "first_name": "Ada", "last_name": "Lovelace", "email": "ada@example.edu", "password": "secret1",
    })
    assert response.headers["Location"].endswith("/settings")
    assert User.find_by_email("ada@example.edu")["role"] == "student"


def test_logout_clears_session(client, login, make_user):
    login(make_user())
    client.get("/logout")
    assert client.get("/").status_code == 302


# -----------------------------
# role checks
# -----------------------------
def test_student_cannot_open_instructor_pages(client, login, make_user):
    login(make_user())
    response = client.get("/students/")
    assert response.status_code == 302
    assert response.headers["Location"].endswith("/")


def test_student_cannot_scan_the_room(client, login, make_user, photo):
    login(make_user())
    response = client.post("/api/attendance/recognize", json={"photo_data_uri": photo})
    assert response.status_code == 403


def test_only_admin_sets_roles(client, login, make_user):
    target = make_user()
    login(make_user(role="instructor"))
    response = client.post("/api/set-role", json={"uid": str(target["_id"]), "role": "admin"})
    assert response.status_code == 403

    login(make_user(role="admin"))
    response = client.post("/api/set-role", json={"uid": str(target["_id"]), "role": "instructor"})
    assert response.status_code == 200
    assert User.find_by_id(target["_id"])["role"] == "instructor"

    response = client.post("/api/set-role", json={"uid": str(target["_id"]), "role": "dean"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "Invalid role specified"


# -----------------------------
# JSON attendance endpoints
# -----------------------------
def test_detect_endpoint(client, login, make_user, ai, photo):
    login(make_user())
    ai.respond(DetectFaceOutput, DetectFaceOutput(face_detected=True))
    response = client.post("/api/attendance/detect", json={"photo_data_uri": photo})
    assert response.status_code == 200
    assert response.get_json() == {"success": True, "face_detected": True}


def test_detect_endpoint_without_photo(client, login, make_user):
    login(make_user())
    response = client.post("/api/attendance/detect", json={})
    assert response.status_code == 400
    assert response.get_json()["error"] == "No photo was provided."


def test_student_checks_in(client, login, make_user, ai, photo):
    student = make_user(face_template=photo)
    login(student)
    ai.respond(VerifyFaceOutput, VerifyFaceOutput(is_match=True))

    response = client.post("/api/attendance/verify", json={"photo_data_uri": photo})

    assert response.status_code == 200
    assert response.get_json()["status"] == "Present"
    assert AttendanceRecord.latest_for_student(student["_id"])["marked_by"] == "verification"


def test_student_checks_in_with_upload(client, login, make_user, ai, photo):
    student = make_user(face_template=photo)
    login(student)
    ai.respond(VerifyFaceOutput, VerifyFaceOutput(is_match=True))
    raw = base64.b64decode(photo.split(",", 1)[1])

    response = client.post(
        "/api/attendance/verify",
        data={"photo": (io.BytesIO(raw), "me.jpg", "image/jpeg")},
        content_type="multipart/form-data",
    )
    assert response.status_code == 200


def test_instructor_scans_the_room(client, login, make_user, ai, photo):
    student = make_user(first_name="Alan", last_name="Turing", face_template=photo)
    login(make_user(role="instructor"))
    ai.respond(RecognizeFaceOutput, RecognizeFaceOutput(recognized_student_id=str(student["_id"])))

    response = client.post("/api/attendance/recognize", json={"photo_data_uri": photo})

    assert response.status_code == 200
    assert response.get_json()["student_name"] == "Alan Turing"


def test_register_face_endpoint(client, login, make_user, ai, photo):
    student = make_user()
    login(student)
    ai.respond(RegisterFaceOutput, RegisterFaceOutput(face_registered=True))

    response = client.post("/api/face/register", json={"photo_data_uri": photo})
    assert response.status_code == 200
    assert User.has_face_template(User.find_by_id(student["_id"]))

    again = client.post("/api/face/register", json={"photo_data_uri": photo})
    assert again.status_code == 400


# -----------------------------
# pages
# -----------------------------
def test_student_attendance_page_respects_cooldown(client, login, make_user, photo):
    student = make_user(face_template=photo)
    login(student)
    AttendanceRecord(student["_id"], timestamp=utcnow() - timedelta(hours=1)).save()

    page = client.get("/attendance")
    assert page.status_code == 200
    assert b"already marked your attendance" in page.data


def test_instructor_pages_render(client, login, make_user, photo):
    instructor = make_user(role="instructor", first_name="Grace", last_name="Hopper")
    student = make_user(face_template=photo)
    Course("Algorithms", instructor["_id"]).save()
    login(instructor)

    for path in ("/", "/attendance", "/students/", f"/students/{student['_id']}", "/marks/",
                 "/timetable/", "/reports/"):
        assert client.get(path).status_code == 200, path


def test_student_pages_render(client, login, make_user):
    login(make_user())
    for path in ("/", "/attendance", "/marks/", "/timetable/student", "/settings", "/profile"):
        assert client.get(path).status_code == 200, path


def test_instructor_adds_mark(client, login, make_user):
    instructor = make_user(role="instructor")
    student = make_user()
    course_id = str(Course("Algorithms", instructor["_id"]).save().inserted_id)
    login(instructor)

    response = client.post("/marks/add", data={
        "student_id": str(student["_id"]),
        "course_id": course_id,
        "assignment_name": "Quiz 1",
        "score": "9",
        "total_score": "10",
    })
    assert response.status_code == 302
    assert Mark.for_student(student["_id"])[0]["assignment_name"] == "Quiz 1"


def test_unknown_student_detail_is_404(client, login, make_user):
    login(make_user(role="instructor"))
    assert client.get("/students/000000000000000000000000").status_code == 404


def test_session_times_follow_school_timezone(app, client, login, make_user, ai, photo):
    app.config["TIMEZONE"] = "Asia/Kolkata"
    instructor = make_user(role="instructor")
    student = make_user(face_template=photo)
    course_id = str(Course("Algorithms", instructor["_id"]).save().inserted_id)
    login(instructor)

    now = utcnow()
    local_now = to_local(now, ZoneInfo("Asia/Kolkata"))
    fmt = "%Y-%m-%dT%H:%M"
    response = client.post("/timetable/sessions", data={
        "course_id": course_id,
        "start_time": (local_now - timedelta(minutes=10)).strftime(fmt),
        "end_time": (local_now + timedelta(minutes=50)).strftime(fmt),
    })
    assert response.status_code == 302

    session = ClassSession.collection().find_one({"course_id": course_id})
    assert abs(session["start_time"] - (now - timedelta(minutes=10))) < timedelta(minutes=2)

    # upcoming sessions are listed in the school's wall clock
    later = local_now.replace(second=0, microsecond=0) + timedelta(hours=2)
    client.post("/timetable/sessions", data={
        "course_id": course_id,
        "start_time": later.strftime(fmt),
        "end_time": (later + timedelta(hours=1)).strftime(fmt),
    })
    page = client.get("/timetable/")
    assert later.strftime("%b %d, %Y %H:%M").encode() in page.data

    login(student)
    ai.respond(VerifyFaceOutput, VerifyFaceOutput(is_match=True))
    assert client.post("/api/attendance/verify", json={"photo_data_uri": photo}).status_code == 200

    record = AttendanceRecord.latest_for_student(student["_id"])
    assert record["class_session_id"] == str(session["_id"])


def test_set_role_unexpected_failure_is_500(client, login, make_user, monkeypatch):
    target = make_user()
    login(make_user(role="admin"))

    def broken(user_id, role):
        raise RuntimeError("database went away")

    monkeypatch.setattr(User, "set_role", staticmethod(broken))
    response = client.post("/api/set-role", json={"uid": str(target["_id"]), "role": "instructor"})
    assert response.status_code == 500
    assert response.get_json()["error"] == "An unknown error occurred."


def test_detect_unexpected_failure_is_500(client, login, make_user, ai, photo):
    login(make_user())
    ai.respond(DetectFaceOutput, RuntimeError("boom"))
    response = client.post("/api/attendance/detect", json={"photo_data_uri": photo})
    assert response.status_code == 500
