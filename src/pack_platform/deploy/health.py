"""Health classification of pack status text."""

from typing import Tuple

from pack_platform.core.models import HealthLevel

# Checked in order; first substring found wins. Case-sensitive, matching the
# tool's lower-case status vocabulary. Note "not running" contains "running".
_RULES = (
    ("running", HealthLevel.READY, "pack is running"),
    ("pending", HealthLevel.DOWN, "pack is pending"),
)


def classify(status_text: str) -> Tuple[HealthLevel, str]:
    """Map raw status text to a health level and message."""
    for needle, level, message in _RULES:
        if needle in status_text:
            return level, message
    return HealthLevel.UNKNOWN, "unknown pack status"
