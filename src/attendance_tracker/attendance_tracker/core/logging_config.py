"""Logging setup for the attendance tracker."""

from __future__ import annotations

import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from flask import Flask, Request

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(
    app: Flask,
    log_level: str = "INFO",
    *,
    log_dir: Optional[str] = None,
    max_log_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Configure root, security and Flask loggers.

    Args:
        app: Flask app instance
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_dir: directory for rotating log files; console only when empty
        max_log_size: size in bytes before a log file rotates
        backup_count: number of rotated files kept
    """

    level = getattr(logging, str(log_level).upper(), logging.INFO)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    handlers: list[logging.Handler] = []

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    handlers.append(console_handler)

    if log_dir:
        path = Path(log_dir)
        path.mkdir(parents=True, exist_ok=True)

        file_handler = logging.handlers.RotatingFileHandler(
            path / "attendance_tracker.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        handlers.append(file_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            path / "errors.log",
            maxBytes=max_log_size,
            backupCount=backup_count,
            encoding="utf-8",
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        handlers.append(error_handler)

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)

    logging.getLogger("security").setLevel(logging.INFO)
    app.logger.setLevel(level)

    app.logger.info("Attendance tracker starting (log level %s, log dir %s)", logging.getLevelName(level), log_dir or "-")


class SecurityLogger:
    """Dedicated logger for authentication events."""

    def __init__(self):
        self.logger = logging.getLogger("security")

    def log_login(self, username: str, ip_address: Optional[str], success: bool = True) -> None:
        status = "SUCCESS" if success else "FAILED"
        self.logger.info("LOGIN %s - User: %s, IP: %s", status, username, ip_address)

    def log_logout(self, user_id: Optional[int], ip_address: Optional[str]) -> None:
        self.logger.info("LOGOUT - User: %s, IP: %s", user_id, ip_address)

    def log_unauthorized_access(self, endpoint: Optional[str], ip_address: Optional[str]) -> None:
        self.logger.warning("UNAUTHORIZED ACCESS - Endpoint: %s, IP: %s", endpoint, ip_address)


security_logger = SecurityLogger()


def get_client_ip(request: Request) -> Optional[str]:
    if request.headers.get("X-Forwarded-For"):
        return request.headers["X-Forwarded-For"].split(",")[0].strip()
    if request.headers.get("X-Real-IP"):
        return request.headers.get("X-Real-IP")
    return request.remote_addr
