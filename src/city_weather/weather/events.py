"""Resolution events and the recorders that receive them."""

import logging
from dataclasses import dataclass
from typing import Protocol

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResolutionEvent:
    """A milestone in resolving a city's weather."""
    message: str
    level: int = logging.INFO
    component: str = "WeatherResolver"


class EventRecorder(Protocol):
    """Sink for resolution events."""

    def record(self, event: ResolutionEvent) -> None:
        ...


class LoggingEventRecorder:
    """Forwards events to the standard logging tree, one logger per component."""

    def __init__(self, prefix: str = "city_weather.events"):
        self.prefix = prefix

    def record(self, event: ResolutionEvent) -> None:
        logging.getLogger(f"{self.prefix}.{event.component}").log(event.level, event.message)
