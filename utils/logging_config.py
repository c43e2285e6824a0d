"""
Logging setup for the attendance system.
"""

import logging
import logging.handlers
from datetime import datetime
from pathlib import Path


def setup_logging(app, max_log_size=10 * 1024 * 1024, backup_count=5):
    """
    Configure logging for the Flask app.

    Args:
        app: Flask app instance (reads LOG_LEVEL, LOG_DIR, LOG_TO_FILE)
        max_log_size: maximum size of one log file in bytes
        backup_count: number of rotated files to keep
    """
    log_level = getattr(logging, str(app.config.get("LOG_LEVEL", "INFO")).upper(), logging.INFO)

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    handlers = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    log_dir = None
    if app.config.get("LOG_TO_FILE", True):
        log_dir = Path(app.config.get("LOG_DIR", "logs"))
        log_dir.mkdir(exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / 'attendx.log',
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            log_dir / 'errors.log',
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    # The SDK's HTTP client is chatty at INFO
    logging.getLogger('httpx').setLevel(logging.WARNING)

    app.logger.setLevel(log_level)

    app.logger.info("=" * 50)
    app.logger.info("ATTENDX STARTUP")
    app.logger.info(f"Timestamp: {datetime.now().isoformat()}")
    app.logger.info(f"Log Level: {logging.getLevelName(log_level)}")
    if log_dir is not None:
        app.logger.info(f"Log Directory: {log_dir.absolute()}")
    app.logger.info("=" * 50)
