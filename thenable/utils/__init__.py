"""thenable utilities"""

from .logging import get_logger, configure_logging, log_settlement, log_queue_event

__all__ = ["get_logger", "configure_logging", "log_settlement", "log_queue_event"]
