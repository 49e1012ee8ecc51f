import logging
from typing import Callable, List

from pydantic import BaseModel

from app.db.models.enums import EntityLevel

logger = logging.getLogger(__name__)


class EntitiesChanged(BaseModel):
    level: EntityLevel
    action: str  # created | updated | deleted
    ids: List[str]


Subscriber = Callable[[EntitiesChanged], None]


class EventHub:
    """Notifica a la capa de presentación que hay que volver a leer la jerarquía."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, event: EntitiesChanged) -> None:
        logger.debug(f"Evento {event.action} en {event.level.value}: {len(event.ids)} entidades")
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(f"❌ Error en suscriptor de eventos: {e}")


event_hub = EventHub()
