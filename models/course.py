from bson import ObjectId
from bson.errors import InvalidId

from utils.db import mongo
from utils.dates import utcnow


def _find_by_id(collection, doc_id):
    try:
        return collection.find_one({"_id": ObjectId(doc_id)})
    except (InvalidId, TypeError):
        return None


class Course:

    @staticmethod
    def collection():
        return mongo.db.courses

    def __init__(self, name, instructor_id, description=None, created_at=None):
        self.name = name
        self.instructor_id = str(instructor_id)
        self.description = description or ""
        self.created_at = created_at or utcnow()

    def to_dict(self):
        return {
            "name": self.name,
            "description": self.description,
            "instructor_id": self.instructor_id,
            "created_at": self.created_at
        }

    def save(self):
        return self.collection().insert_one(self.to_dict())

    @staticmethod
    def find_by_id(course_id):
        return _find_by_id(Course.collection(), course_id)

    @staticmethod
    def for_instructor(instructor_id):
        return list(Course.collection().find({"instructor_id": str(instructor_id)}).sort("name", 1))

    # Students are treated as enrolled in every course
    @staticmethod
    def all_courses():
        return list(Course.collection().find().sort("name", 1))


class ClassSession:

    @staticmethod
    def collection():
        return mongo.db.class_sessions

    def __init__(self, course_id, start_time, end_time, created_at=None):
        self.course_id = str(course_id)
        self.start_time = start_time
        self.end_time = end_time
        self.created_at = created_at or utcnow()

    def to_dict(self):
        return {
            "course_id": self.course_id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "created_at": self.created_at
        }

    def save(self):
        return self.collection().insert_one(self.to_dict())

    @staticmethod
    def find_by_id(session_id):
        return _find_by_id(ClassSession.collection(), session_id)

    @staticmethod
    def upcoming(course_ids, now=None):
        ids = [str(c) for c in course_ids]
        if not ids:
            return []
        return list(
            ClassSession.collection()
            .find({"course_id": {"$in": ids}, "start_time": {"$gte": now or utcnow()}})
            .sort("start_time", 1)
        )

    @staticmethod
    def current(now=None):
        """The session running right now, earliest start first if they overlap."""
        now = now or utcnow()
        return ClassSession.collection().find_one(
            {"start_time": {"$lte": now}, "end_time": {"$gte": now}},
            sort=[("start_time", 1)]
        )

    @staticmethod
    def in_range(course_id, start, end):
        """Sessions of a course starting in [start, end)."""
        return list(
            ClassSession.collection()
            .find({"course_id": str(course_id), "start_time": {"$gte": start, "$lt": end}})
            .sort("start_time", 1)
        )
