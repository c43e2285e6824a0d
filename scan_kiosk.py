"""
scan_kiosk.py
---------------------------------
Room scanner for a classroom PC with a webcam.

Runs the attendance scan loop against the local camera and marks every
recognized student Present. Stop with Ctrl+C.

    python scan_kiosk.py --camera 0
"""

import argparse
import logging

from app import create_app
from utils.actions import handle_detect_face, handle_recognize_and_mark_attendance
from utils.camera import Camera, CameraError
from utils.scan_loop import ScanLoop

logger = logging.getLogger("scan_kiosk")


def on_event(kind, payload):
    if kind == "success":
        logger.info("[KIOSK] %s has been marked as \"Present\".", payload.get("student_name"))
    else:
        logger.warning("[KIOSK] %s", payload.get("error"))


def main(argv=None):
    parser = argparse.ArgumentParser(description="AttendX room scanner")
    parser.add_argument("--camera", type=int, default=None, help="camera index (default: CAMERA_INDEX)")
    parser.add_argument("--interval", type=float, default=None, help="seconds between scans")
    parser.add_argument("--reset-delay", type=float, default=None, help="pause after a result")
    parser.add_argument("--once", action="store_true", help="stop after the first recognized student")
    args = parser.parse_args(argv)

    app = create_app()
    config = app.config

    camera = Camera(
        index=config["CAMERA_INDEX"] if args.camera is None else args.camera,
        max_side=config["MAX_IMAGE_SIDE"],
    )

    with app.app_context():
        try:
            camera.open()
        except CameraError as e:
            logger.error("[KIOSK] %s", e)
            return 1

        loop = ScanLoop(
            capture_frame=camera.capture_data_uri,
            detect=handle_detect_face,
            identify=handle_recognize_and_mark_attendance,
            interval=config["SCAN_INTERVAL_SECONDS"] if args.interval is None else args.interval,
            reset_delay=config["SCAN_RESET_SECONDS"] if args.reset_delay is None else args.reset_delay,
            on_event=on_event,
        )

        logger.info("[KIOSK] Scanning (Ctrl+C to exit)")
        try:
            loop.run(continuous=not args.once)
        except KeyboardInterrupt:
            loop.stop()
        finally:
            camera.release()

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
