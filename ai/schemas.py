"""
Input/output schemas for the generative-AI flows.

Output models double as the JSON response schema handed to Gemini, so field
descriptions are written for the model.
"""
from typing import Optional

from pydantic import BaseModel, Field


PHOTO_DATA_URI_DESCRIPTION = (
    "A photo snapshot from the webcam, as a data URI that must include a MIME type "
    "and use Base64 encoding. Expected format: 'data:<mimetype>;base64,<encoded_data>'."
)


class DetectFaceInput(BaseModel):
    photo_data_uri: str = Field(..., description=PHOTO_DATA_URI_DESCRIPTION)


class DetectFaceOutput(BaseModel):
    face_detected: bool = Field(..., description="Whether or not a face was detected in the photo.")


class RegisterFaceInput(BaseModel):
    photo_data_uri: str = Field(..., description=PHOTO_DATA_URI_DESCRIPTION)


class RegisterFaceOutput(BaseModel):
    face_registered: bool = Field(
        ..., description="Whether or not a face was detected and is suitable for registration."
    )


class VerifyFaceInput(BaseModel):
    photo_data_uri: str = Field(..., description=PHOTO_DATA_URI_DESCRIPTION)
    registered_face_template: str = Field(
        ..., description="The student's registered face template image as a data URI."
    )


class VerifyFaceOutput(BaseModel):
    is_match: bool = Field(
        ..., description="Whether the face in the photo matches the registered face template."
    )


class DirectoryEntry(BaseModel):
    student_id: str
    name: str
    face_template: str


class RecognizeFaceInput(BaseModel):
    photo_data_uri: str = Field(..., description=PHOTO_DATA_URI_DESCRIPTION)
    student_directory: list[DirectoryEntry]


class RecognizeFaceOutput(BaseModel):
    recognized_student_id: Optional[str] = Field(
        None, description="The ID of the recognized student, if any."
    )


class SummarizeAttendanceTrendsInput(BaseModel):
    course_name: str = Field(..., description="The name of the course to analyze.")
    attendance_records: str = Field(..., description="Attendance records for the course, in JSON format.")


class SummarizeAttendanceTrendsOutput(BaseModel):
    summary: str = Field(..., description="A summarized report of attendance trends for the course.")


class AbsenceJustificationInput(BaseModel):
    student_name: str = Field(..., min_length=1, description="The name of the student.")
    professor_name: str = Field(..., min_length=1, description="The name of the professor.")
    course_name: str = Field(..., min_length=1, description="The name of the course.")
    absence_reason: str = Field(
        ..., min_length=1, description="A brief description of the reason for the absence."
    )
    additional_details: Optional[str] = Field(
        None, description="Any additional details to include in the email."
    )


class AbsenceJustificationOutput(BaseModel):
    email_draft: str = Field(..., description="A draft email to the professor explaining the absence.")
