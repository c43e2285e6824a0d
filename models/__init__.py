# models/__init__.py

from .users import User
from .attendance import AttendanceRecord
from .course import Course, ClassSession
from .marks import Mark

__all__ = [
    "User",
    "AttendanceRecord",
    "Course",
    "ClassSession",
    "Mark"
]
