"""
utils/images.py
---------------------------------
Helpers for the photo data URIs that travel between the browser, the
database (face templates) and the generative-AI calls.

A data URI looks like ``data:image/jpeg;base64,<encoded_data>``.
"""

import base64
import binascii
import re

import cv2
import numpy as np

from utils.errors import InvalidImageError

DATA_URI_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<data>.*)$", re.DOTALL)

JPEG_QUALITY = 90


def parse_data_uri(data_uri):
    """Return ``(mime_type, raw_bytes)`` for an image data URI."""
    if not data_uri or not isinstance(data_uri, str):
        raise InvalidImageError("No photo was provided.")

    match = DATA_URI_RE.match(data_uri.strip())
    if not match:
        raise InvalidImageError("Photo must be a base64 data URI.")

    mime_type = match.group("mime").lower()
    if not mime_type.startswith("image/"):
        raise InvalidImageError("Please select an image file.")

    try:
        raw = base64.b64decode(match.group("data"), validate=True)
    except (binascii.Error, ValueError):
        raise InvalidImageError("Photo data is not valid base64.")

    if not raw:
        raise InvalidImageError("Photo is empty.")
    return mime_type, raw


def to_data_uri(raw, mime_type="image/jpeg"):
    return f"data:{mime_type};base64,{base64.b64encode(raw).decode('ascii')}"


def decode_image(raw):
    """Decode image bytes into a BGR numpy array."""
    buffer = np.frombuffer(raw, dtype=np.uint8)
    frame = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if frame is None or frame.size == 0:
        raise InvalidImageError("Photo could not be decoded as an image.")
    return frame


def frame_to_data_uri(frame, quality=JPEG_QUALITY):
    ok, buffer = cv2.imencode(".jpg", frame, [int(cv2.IMWRITE_JPEG_QUALITY), quality])
    if not ok:
        raise InvalidImageError("Frame could not be encoded as JPEG.")
    return to_data_uri(buffer.tobytes(), "image/jpeg")


def resize_to_fit(frame, max_side):
    h, w = frame.shape[:2]
    longest = max(h, w)
    if not max_side or longest <= max_side:
        return frame
    scale = max_side / float(longest)
    return cv2.resize(frame, (int(w * scale), int(h * scale)), interpolation=cv2.INTER_AREA)


def normalize_data_uri(data_uri, max_side=1024):
    """
    Validate a photo and re-encode it as a JPEG no larger than ``max_side``.

    Face templates are stored inline on the user document, so keeping them
    small keeps both the document and every verification prompt small.
    """
    _, raw = parse_data_uri(data_uri)
    frame = decode_image(raw)
    return frame_to_data_uri(resize_to_fit(frame, max_side))


def file_to_data_uri(file_storage):
    """Turn an uploaded werkzeug FileStorage into a data URI."""
    mime_type = (file_storage.mimetype or "").lower()
    if not mime_type.startswith("image/"):
        raise InvalidImageError("Please select an image file.")
    raw = file_storage.read()
    if not raw:
        raise InvalidImageError("Photo is empty.")
    return to_data_uri(raw, mime_type)
