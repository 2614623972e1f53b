"""Utility modules."""

from . import file_ops, reporting, time_utils
from .error_handler import ErrorHandler

__all__ = ["file_ops", "reporting", "time_utils", "ErrorHandler"]
