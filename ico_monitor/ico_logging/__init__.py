"""
Structured logging for ICO Monitor.

JSON logs with timestamp, event_type, and sale context.
Use get_logger() in all modules for aggregation-friendly output.
"""

from ico_monitor.ico_logging.logger import bind_sale, get_logger

__all__ = ["get_logger", "bind_sale"]
