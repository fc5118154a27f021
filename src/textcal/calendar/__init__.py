"""Calendar link generation and document delivery."""

from .delivery import DeliveryAction, DeliveryMechanism, deliver_event, file_name_for
from .links import build_web_calendar_link, format_date_range

__all__ = [
    "DeliveryAction",
    "DeliveryMechanism",
    "build_web_calendar_link",
    "deliver_event",
    "file_name_for",
    "format_date_range",
]
