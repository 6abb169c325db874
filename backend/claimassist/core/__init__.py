"""
Core module exports
"""
from claimassist.core.config import settings, get_settings, Settings
from claimassist.core.logging import logger, get_logger, log_audit_event

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "logger",
    "get_logger",
    "log_audit_event",
]
