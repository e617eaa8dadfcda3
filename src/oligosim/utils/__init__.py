"""Utility modules for oligosim."""

from oligosim.utils.logging_utils import setup_logger
