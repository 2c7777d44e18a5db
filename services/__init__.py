# Application services
from .debounce import Debouncer
from .formatting import format_countdown
from .recall_service import RecallService

__all__ = ["Debouncer", "format_countdown", "RecallService"]
