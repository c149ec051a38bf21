"""Utility modules for pugsrc.

Provides:
- logger: get_logger for logging
"""

from pugsrc.utils.logger import get_logger

__all__ = ["get_logger"]
