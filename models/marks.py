from utils.db import mongo
from utils.dates import utcnow


class Mark:
    @staticmethod
    def collection():
        return mongo.db.marks

    def __init__(self, student_id, course_id, assignment_name, score, total_score, timestamp=None):
        self.student_id = str(student_id)
        self.course_id = str(course_id)
        self.assignment_name = assignment_name
        self.score = score
        self.total_score = total_score
        self.timestamp = timestamp or utcnow()

    def to_dict(self):
        return {
            "student_id": self.student_id,
            "course_id": self.course_id,
            "assignment_name": self.assignment_name,
            "score": self.score,
            "total_score": self.total_score,
            "timestamp": self.timestamp,
        }

    def save(self):
        return Mark.collection().insert_one(self.to_dict())

    @staticmethod
    def for_courses(course_ids, limit=None):
        ids = [str(c) for c in course_ids]
        if not ids:
            return []
        cursor = Mark.collection().find({"course_id": {"$in": ids}}).sort("timestamp", -1)
        if limit:
            cursor = cursor.limit(limit)
        return list(cursor)

    @staticmethod
    def for_student(student_id):
        return list(Mark.collection().find({"student_id": str(student_id)}).sort("timestamp", -1))
