from datetime import timedelta

from utils.db import mongo
from utils.dates import utcnow

STATUSES = ("Present", "Absent", "Late")


class AttendanceRecord:
    @staticmethod
    def collection():
        return mongo.db.attendance_records

    def __init__(self, student_id, status="Present", class_session_id=None, course_id=None,
                 timestamp=None, marked_by="verification"):
        if status not in STATUSES:
            raise ValueError(f"Unknown attendance status: {status}")
        self.student_id = str(student_id)
        self.class_session_id = str(class_session_id) if class_session_id else None
        self.course_id = str(course_id) if course_id else None
        self.timestamp = timestamp or utcnow()
        self.status = status
        self.marked_by = marked_by  # verification | recognition | manual

    def to_dict(self):
        return {
            "student_id": self.student_id,
            "class_session_id": self.class_session_id,
            "course_id": self.course_id,
            "timestamp": self.timestamp,
            "status": self.status,
            "marked_by": self.marked_by,
        }

    # Append-only: every call inserts a new document, duplicates included
    def save(self):
        return AttendanceRecord.collection().insert_one(self.to_dict())

    @staticmethod
    def for_student(student_id, limit=None):
        cursor = AttendanceRecord.collection().find({"student_id": str(student_id)}).sort("timestamp", -1)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    @staticmethod
    def latest_for_student(student_id):
        records = AttendanceRecord.for_student(student_id, limit=1)
        return records[0] if records else None

    @staticmethod
    def between(start, end):
        """Records with start <= timestamp < end, oldest first."""
        return list(
            AttendanceRecord.collection()
            .find({"timestamp": {"$gte": start, "$lt": end}})
            .sort("timestamp", 1)
        )

    @staticmethod
    def for_sessions(session_ids):
        ids = [str(s) for s in session_ids]
        if not ids:
            return []
        return list(
            AttendanceRecord.collection()
            .find({"class_session_id": {"$in": ids}})
            .sort("timestamp", 1)
        )

    @staticmethod
    def can_mark_again(student_id, now=None, cooldown_hours=12):
        """
        Whether the student's last record is older than the check-in cooldown.
        Returns ``(allowed, latest_record)``.
        """
        latest = AttendanceRecord.latest_for_student(student_id)
        if not latest:
            return True, None
        now = now or utcnow()
        return latest["timestamp"] < now - timedelta(hours=cooldown_hours), latest
