"""
utils/camera.py
---------------------------------
Local webcam access for the kiosk scanner. Frames leave this module as JPEG
data URIs, the same format the browser sends.
"""

import logging

import cv2

from utils.images import frame_to_data_uri, resize_to_fit

logger = logging.getLogger(__name__)


class CameraError(RuntimeError):
    pass


class Camera:

    def __init__(self, index=0, max_side=1024):
        self.index = index
        self.max_side = max_side
        self.cap = None

    def open(self):
        self.cap = cv2.VideoCapture(self.index)
        if not self.cap.isOpened():
            self.cap = None
            raise CameraError(f"Cannot open camera {self.index}.")
        logger.info("[CAMERA] Opened camera %s", self.index)
        return self

    def read_frame(self):
        if self.cap is None:
            return None
        ok, frame = self.cap.read()
        if not ok or frame is None:
            logger.warning("[CAMERA] Frame grab failed")
            return None
        return frame

    def capture_data_uri(self):
        """Grab one frame as a JPEG data URI, or None if no frame is available."""
        frame = self.read_frame()
        if frame is None:
            return None
        return frame_to_data_uri(resize_to_fit(frame, self.max_side))

    def release(self):
        if self.cap is not None:
            self.cap.release()
            self.cap = None
            logger.info("[CAMERA] Released camera %s", self.index)

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
