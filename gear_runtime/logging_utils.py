"""
Gear Runtime - Logging Utilities.

============================================================
PURPOSE
============================================================
Logging setup and credential masking for hook output.

SECURITY REQUIREMENTS:
1. NEVER log scraped data-store passwords
2. Mask "Root Password:" lines echoed from hook output

============================================================
"""

import json
import logging
import re
import sys
from typing import Iterable, List, Optional

from .types import DbConnection


# ============================================================
# SENSITIVE DATA PATTERNS
# ============================================================

SENSITIVE_LINE_PATTERNS = [
    re.compile(r"(Root Password:\s*)(\S+)", re.IGNORECASE),
    re.compile(r"(password[=:]\s*)(\S+)", re.IGNORECASE),
]


# ============================================================
# MASKING FUNCTIONS
# ============================================================

def mask_value(value: Optional[str], show_chars: int = 0) -> str:
    """
    Mask a sensitive value, optionally showing the first few chars.

    Args:
        value: Value to mask
        show_chars: Number of chars to show at start

    Returns:
        Masked value
    """
    if not value or show_chars <= 0 or len(value) <= show_chars:
        return "***"
    return f"{value[:show_chars]}...***"


def mask_connection(db: DbConnection) -> dict:
    """Connection details safe for logging."""
    return {
        "username": db.username,
        "password": mask_value(db.password) if db.password else None,
        "ip": db.ip,
        "port": db.port,
    }


def mask_output_lines(lines: Iterable[str]) -> List[str]:
    """Mask secrets echoed in hook output."""
    masked = []
    for line in lines:
        for pattern in SENSITIVE_LINE_PATTERNS:
            line = pattern.sub(lambda m: f"{m.group(1)}***", line)
        masked.append(line)
    return masked


# ============================================================
# LOGGING SETUP
# ============================================================

def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
) -> logging.Logger:
    """
    Set up process logging.

    Args:
        level: Log level
        log_format: Output format (json or text)

    Returns:
        Configured runtime logger
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_format == "json":
        formatter = logging.Formatter(
            json.dumps({
                "timestamp": "%(asctime)s",
                "level": "%(levelname)s",
                "logger": "%(name)s",
                "message": "%(message)s",
            })
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
        )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = [handler]

    return logging.getLogger("gear_runtime")
