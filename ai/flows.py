"""
Prompted generative-AI flows.

- detect_face: is there a human face in the photo?
- register_face: is the photo a usable face template?
- verify_student_face: one-to-one match against a stored template
- recognize_student_face: one-to-many match against the student directory
- summarize_attendance_trends: short text report for instructors
- generate_absence_justification: email draft for a student
"""
from ai.client import get_client, media
from ai.schemas import (
    AbsenceJustificationInput,
    AbsenceJustificationOutput,
    DetectFaceInput,
    DetectFaceOutput,
    RecognizeFaceInput,
    RecognizeFaceOutput,
    RegisterFaceInput,
    RegisterFaceOutput,
    SummarizeAttendanceTrendsInput,
    SummarizeAttendanceTrendsOutput,
    VerifyFaceInput,
    VerifyFaceOutput,
)


def detect_face(photo_data_uri, client=None):
    data = DetectFaceInput(photo_data_uri=photo_data_uri)
    parts = [
        "You are an AI assistant for an attendance system. Your task is to determine if the "
        "provided image contains a human face.\n\n"
        "Analyze the image provided and set the 'face_detected' boolean field to true if a face "
        "is clearly visible, and false otherwise.\n\nImage:",
        media(data.photo_data_uri),
    ]
    return (client or get_client()).generate(parts, DetectFaceOutput, "detect_face")


def register_face(photo_data_uri, client=None):
    data = RegisterFaceInput(photo_data_uri=photo_data_uri)
    parts = [
        "You are an AI assistant for a secure attendance system. Your task is to determine if the "
        "provided image contains a clear, single human face suitable for creating a face template "
        "for future recognition.\n\n"
        "Analyze the image provided. Set the 'face_registered' boolean field to true only if a "
        "single, clear, forward-facing human face is visible. If the image is blurry, contains "
        "multiple faces, no face, or is otherwise unsuitable, set it to false.\n\nImage:",
        media(data.photo_data_uri),
    ]
    return (client or get_client()).generate(parts, RegisterFaceOutput, "register_face")


def verify_student_face(photo_data_uri, registered_face_template, client=None):
    data = VerifyFaceInput(
        photo_data_uri=photo_data_uri,
        registered_face_template=registered_face_template,
    )
    parts = [
        "You are an AI assistant for a secure attendance system. Your task is to verify if a "
        "student's photo matches their registered face template.\n\n"
        "You will be given a live photo to analyze and a registered face template for comparison.\n\n"
        "Analyze the person in the live photo and determine if they are the same person as in the "
        "registered face template.\n\n"
        "If a definitive match is found, return true in the 'is_match' field. If no match is found, "
        "or if you are not confident in the match, return false.\n\nRegistered Face Template:",
        media(data.registered_face_template),
        "Image to analyze:",
        media(data.photo_data_uri),
    ]
    return (client or get_client()).generate(parts, VerifyFaceOutput, "verify_student_face")


def recognize_student_face(photo_data_uri, student_directory, client=None):
    """
    ``student_directory`` is a list of ``{"student_id", "name", "face_template"}``.
    Each template is sent as its own image part labelled with the student id.
    """
    data = RecognizeFaceInput(photo_data_uri=photo_data_uri, student_directory=student_directory)
    parts = [
        "You are an AI assistant for an attendance system. Your task is to recognize a student "
        "from a photo.\nYou will be given a photo and a directory of students.\n"
        "Analyze the image and determine if the person in the photo matches one of the students "
        "in the directory.\nIf a match is found, return the student's ID in the "
        "'recognized_student_id' field. If no match is found, leave it empty.\n\nStudent Directory:",
    ]
    for entry in data.student_directory:
        parts.append(f"Student ID: {entry.student_id} | Name: {entry.name}")
        parts.append(media(entry.face_template))
    parts.append("Image to analyze:")
    parts.append(media(data.photo_data_uri))
    return (client or get_client()).generate(parts, RecognizeFaceOutput, "recognize_student_face")


def summarize_attendance_trends(course_name, attendance_records, client=None):
    data = SummarizeAttendanceTrendsInput(course_name=course_name, attendance_records=attendance_records)
    parts = [
        "You are an AI assistant that helps faculty members understand student attendance trends.\n\n"
        f"Summarize the attendance trends for the course: {data.course_name}.\n"
        f"Here are the attendance records in JSON format: {data.attendance_records}\n\n"
        "Highlight any significant patterns or anomalies in the attendance data.\n"
        "Provide insights that can help the faculty member identify potential issues and address them.\n"
        "The summary should be concise and easy to understand."
    ]
    return (client or get_client()).generate(
        parts, SummarizeAttendanceTrendsOutput, "summarize_attendance_trends"
    )


def generate_absence_justification(student_name, professor_name, course_name, absence_reason,
                                   additional_details=None, client=None):
    data = AbsenceJustificationInput(
        student_name=student_name,
        professor_name=professor_name,
        course_name=course_name,
        absence_reason=absence_reason,
        additional_details=additional_details,
    )
    parts = [
        "You are an AI assistant helping a student draft an email to their professor explaining "
        "their absence from class.\n\n"
        "Compose an email that includes:\n"
        f"- A polite greeting to the professor ({data.professor_name}).\n"
        f"- A clear statement of absence from the course ({data.course_name}).\n"
        f"- A concise explanation of the reason for the absence: {data.absence_reason}.\n"
        f"- Any additional details provided by the student: {data.additional_details or 'None'}.\n"
        "- A polite closing, expressing gratitude and offering to provide further information if needed.\n"
        f"- The student's name ({data.student_name}).\n\n"
        "Ensure the email is professional, respectful, and clearly communicates the necessary information."
    ]
    return (client or get_client()).generate(
        parts, AbsenceJustificationOutput, "generate_absence_justification"
    )
