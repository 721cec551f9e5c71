"""Utilities"""
from .logger import (
    BotLogger,
    get_logger,
    log_error,
    log_session_event,
    log_step_event,
    mask_value,
    setup_logging,
)

__all__ = [
    'BotLogger',
    'get_logger',
    'log_error',
    'log_session_event',
    'log_step_event',
    'mask_value',
    'setup_logging',
]
