import logging
import threading
from functools import partial
from typing import Any, Callable, Optional

from .live_source import (
    PASS_THROUGH_EVENTS,
    ChatEvent,
    Connected,
    ConnectionFailed,
    LiveEvent,
    LiveSource,
)
from .services.game import GameMachine


class LiveRelay:
    """Owns the single live-chat connection and feeds its events to the game.

    ``broadcast(event, payload)`` reaches every client; ``notify(sid, event,
    payload)`` reaches only the admin client that opened the connection.
    Events from a replaced connection are dropped.
    """

    def __init__(
        self,
        machine: GameMachine,
        source_factory: Callable[[], LiveSource],
        broadcast: Callable[[str, Any], None],
        notify: Callable[[str, str, Any], None],
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.machine = machine
        self._source_factory = source_factory
        self._broadcast = broadcast
        self._notify = notify
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._source: Optional[LiveSource] = None
        self._owner_sid: Optional[str] = None
        self._generation = 0

    @property
    def owner_sid(self) -> Optional[str]:
        return self._owner_sid

    def connect(self, sid: str, broadcaster_id: str) -> None:
        with self._lock:
            self._drop_source()
            self._generation += 1
            source = self._source_factory()
            self._source = source
            self._owner_sid = sid
            generation = self._generation
        self.logger.info(f"[live-join] sid={sid} broadcaster={broadcaster_id}")
        source.connect(broadcaster_id, partial(self.dispatch, generation, sid))

    def release(self, sid: str) -> None:
        """Disconnect the live source if ``sid`` opened it."""
        with self._lock:
            if sid != self._owner_sid:
                return
            self._drop_source()
            self._generation += 1

    def dispatch(self, generation: int, sid: str, event: LiveEvent) -> None:
        if generation != self._generation:
            return
        if isinstance(event, Connected):
            self._notify(sid, 'connected', event.to_payload())
        elif isinstance(event, ConnectionFailed):
            self.logger.warning(f"[live-failed] sid={sid} message={event.message}")
            with self._lock:
                if generation == self._generation:
                    self._source = None
                    self._owner_sid = None
            self._notify(sid, 'error', {'message': event.message})
        elif isinstance(event, ChatEvent):
            self._broadcast(event.name, event.to_payload())
            self.machine.submit_answer(event.participant_id, event.comment)
        elif isinstance(event, PASS_THROUGH_EVENTS):
            self._broadcast(event.name, event.to_payload())
        else:
            raise TypeError(f'unknown live event {event!r}')

    def _drop_source(self) -> None:
        if self._source is not None:
            self.logger.info(f"[live-release] sid={self._owner_sid}")
            self._source.disconnect()
        self._source = None
        self._owner_sid = None
