from bson import ObjectId
from bson.errors import InvalidId
from werkzeug.security import generate_password_hash, check_password_hash

from utils.db import mongo
from utils.dates import utcnow

ROLES = ("student", "instructor", "admin")


def _object_id(user_id):
    try:
        return ObjectId(user_id)
    except (InvalidId, TypeError):
        return None


class User:

    @staticmethod
    def collection():
        return mongo.db.users

    def __init__(self, first_name, last_name, email, password, role="student",
                 face_template=None, created_at=None, updated_at=None):
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        self.first_name = first_name
        self.last_name = last_name
        self.email = email.strip().lower()
        self.password = generate_password_hash(password)
        self.role = role

        # Registered face photo as a data URI (None until registered)
        self.face_template = face_template

        self.created_at = created_at or utcnow()
        self.updated_at = updated_at or utcnow()

    # Convert to dictionary for MongoDB
    def to_dict(self):
        return {
            "first_name": self.first_name,
            "last_name": self.last_name,
            "email": self.email,
            "password": self.password,
            "role": self.role,
            "face_template": self.face_template,
            "created_at": self.created_at,
            "updated_at": self.updated_at
        }

    # Save new user
    def save(self):
        return self.collection().insert_one(self.to_dict())

    # Find user by ID
    @staticmethod
    def find_by_id(user_id):
        oid = _object_id(user_id)
        if oid is None:
            return None
        return User.collection().find_one({"_id": oid})

    # Find user by email
    @staticmethod
    def find_by_email(email):
        if not email:
            return None
        return User.collection().find_one({"email": email.strip().lower()})

    # Verify password
    @staticmethod
    def verify_password(email, password):
        user = User.find_by_email(email)
        if user and password and check_password_hash(user["password"], password):
            return user
        return None

    @staticmethod
    def list_students(with_face_template=False):
        query = {"role": "student"}
        if with_face_template:
            query["face_template"] = {"$nin": [None, ""]}
        return list(User.collection().find(query).sort([("last_name", 1), ("first_name", 1)]))

    # Store the face template after a successful registration
    @staticmethod
    def set_face_template(user_id, data_uri):
        return User.collection().update_one(
            {"_id": ObjectId(user_id)},
            {"$set": {"face_template": data_uri, "updated_at": utcnow()}}
        )

    @staticmethod
    def has_face_template(user):
        return bool(user and user.get("face_template"))

    @staticmethod
    def set_role(user_id, role):
        if role not in ROLES:
            raise ValueError(f"Unknown role: {role}")
        return User.collection().update_one(
            {"_id": ObjectId(user_id)},
            {"$set": {"role": role, "updated_at": utcnow()}}
        )

    @staticmethod
    def full_name(user):
        if not user:
            return "Unknown Student"
        name = f"{user.get('first_name', '')} {user.get('last_name', '')}".strip()
        return name or user.get("email", "Unknown Student")
