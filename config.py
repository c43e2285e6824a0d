"""
config.py
-----------------
Application configuration. Values come from the environment (or a local
.env file) so the same code runs in development, the kiosk and tests.
"""

import os

from dotenv import load_dotenv

load_dotenv()


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key-change-in-production")
    MAX_CONTENT_LENGTH = 16 * 1024 * 1024  # 16MB, webcam snapshots are data URIs

    # MongoDB
    MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/AttendX")
    MONGO_CREATE_INDEXES = os.getenv("MONGO_CREATE_INDEXES", "1") == "1"

    # Generative AI (Gemini)
    GEMINI_API_KEY = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.5-flash")

    # Logging
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR = os.getenv("LOG_DIR", "logs")
    LOG_TO_FILE = os.getenv("LOG_TO_FILE", "1") == "1"

    # Attendance scan loop
    SCAN_INTERVAL_SECONDS = float(os.getenv("SCAN_INTERVAL_SECONDS", "2"))
    SCAN_RESET_SECONDS = float(os.getenv("SCAN_RESET_SECONDS", "5"))
    CHECKIN_COOLDOWN_HOURS = float(os.getenv("CHECKIN_COOLDOWN_HOURS", "12"))

    # Images sent to the model are downscaled to this longest side
    MAX_IMAGE_SIDE = int(os.getenv("MAX_IMAGE_SIDE", "1024"))

    # Wall-clock zone for form input, page output and "today" (IANA name)
    TIMEZONE = os.getenv("TIMEZONE", "UTC")

    # Kiosk camera
    CAMERA_INDEX = int(os.getenv("CAMERA_INDEX", "0"))

    # Used in absence email drafts when a course has no instructor on record
    DEFAULT_PROFESSOR_NAME = os.getenv("DEFAULT_PROFESSOR_NAME", "Professor")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    MONGO_URI = "mongodb://localhost:27017/AttendX_test"
    MONGO_CREATE_INDEXES = False
    GEMINI_API_KEY = "test-key"
    LOG_TO_FILE = False
    TIMEZONE = "UTC"
    SCAN_INTERVAL_SECONDS = 0
    SCAN_RESET_SECONDS = 0
