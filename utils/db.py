"""
utils/db.py
-----------------
Shared PyMongo handle for the models and the lookup indexes built at startup.
"""

import logging

from flask_pymongo import PyMongo
from pymongo import ASCENDING, DESCENDING

logger = logging.getLogger(__name__)

# Bound to the app in init_db_connection; tests swap in mongomock
mongo = PyMongo()


def init_db_connection(app):
    """
    Initialize MongoDB connection with Flask app.
    Settings (MONGO_URI) must already be loaded into app.config.
    """
    mongo.init_app(app)

    if app.config.get("MONGO_CREATE_INDEXES", True):
        ensure_indexes()

    logger.info("MongoDB connection initialized (%s)", app.config.get("MONGO_URI"))
    return mongo


def ensure_indexes():
    # Lookup indexes only. Attendance and marks stay append-only with no
    # uniqueness constraint.
    users_col().create_index([("email", ASCENDING)])
    users_col().create_index([("role", ASCENDING)])
    attendance_col().create_index([("student_id", ASCENDING), ("timestamp", DESCENDING)])
    attendance_col().create_index([("timestamp", ASCENDING)])
    attendance_col().create_index([("class_session_id", ASCENDING)])
    courses_col().create_index([("instructor_id", ASCENDING)])
    sessions_col().create_index([("course_id", ASCENDING), ("start_time", ASCENDING)])
    marks_col().create_index([("course_id", ASCENDING), ("timestamp", DESCENDING)])
    marks_col().create_index([("student_id", ASCENDING), ("timestamp", DESCENDING)])


# Collections (shortcuts)
users_col = lambda: mongo.db.users
attendance_col = lambda: mongo.db.attendance_records
courses_col = lambda: mongo.db.courses
sessions_col = lambda: mongo.db.class_sessions
marks_col = lambda: mongo.db.marks
