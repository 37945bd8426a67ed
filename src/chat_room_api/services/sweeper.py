import logging
import threading
from collections.abc import Callable

from chat_room_api.app.config import BROADCAST_TARGET, LEAVE_TEXT, STATUS_TYPE
from chat_room_api.infrastructure.data_models import Message, format_message_time
from chat_room_api.infrastructure.platform_manager import create_logger, now_ms
from chat_room_api.services.message_service import MessageLog
from chat_room_api.services.participant_service import ParticipantDirectory


class InactivitySweeper:
    """
    Evicts participants whose last heartbeat is older than the staleness threshold and
    posts a departure notice for each of them.

    `sweep()` runs one tick and can be called directly; `start()` runs it every
    `interval_ms` on a daemon thread until `stop()` is called.

    Args:
        directory (ParticipantDirectory): Directory to evict participants from.
        log (MessageLog): Log that receives the departure notices.
        interval_ms (int): Time between two ticks.
        threshold_ms (int): Maximum time since the last heartbeat before eviction.
        clock (Callable[[], int]): Source of the current time in epoch milliseconds.
        logger (logging.Logger | None): Logger for evictions and failures.
    """

    def __init__(
        self,
        directory: ParticipantDirectory,
        log: MessageLog,
        *,
        interval_ms: int = 15000,
        threshold_ms: int = 10000,
        clock: Callable[[], int] = now_ms,
        logger: logging.Logger | None = None,
    ) -> None:
        self._directory = directory
        self._log = log
        self._interval_ms = interval_ms
        self._threshold_ms = threshold_ms
        self._clock = clock
        self._logger = logger or create_logger(logger_name="chat-room-sweeper")
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def sweep(self) -> list[str]:
        """
        Run one eviction tick.

        Returns:
            list[str]: Names of the evicted participants. Failures are logged and
            reported as an empty list.
        """
        try:
            inactive = self._directory.find_inactive(self._clock() - self._threshold_ms)
            if not inactive:
                return []

            # Delete by the same predicate; "now" is read again
            removed = self._directory.evict_inactive(self._clock() - self._threshold_ms)
            if not removed:
                return []

            departed_at = format_message_time(self._clock())
            departures = [
                Message(
                    sender=participant.name,
                    to=BROADCAST_TARGET,
                    text=LEAVE_TEXT,
                    type=STATUS_TYPE,
                    time=departed_at,
                )
                for participant in removed
            ]
            self._log.append(departures)

            names = [participant.name for participant in removed]
            self._logger.info(f"Evicted {len(names)} inactive participant(s): {', '.join(names)}")
            return names
        except Exception as e:
            self._logger.exception(f"Inactivity sweep failed: {e}")
            return []

    def start(self) -> None:
        if self.running:
            return
        # Each thread gets its own event, so a thread still finishing a tick after stop()
        # cannot be revived by a later start()
        self._stop_event = threading.Event()
        self._thread = threading.Thread(
            target=self._run, args=(self._stop_event,), daemon=True, name="inactivity_sweeper"
        )
        self._thread.start()
        self._logger.info(f"Inactivity sweeper started (every {self._interval_ms} ms)")

    def stop(self, timeout: float | None = 5.0) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout)
        if self._thread.is_alive():
            self._logger.warning("Inactivity sweeper still finishing a tick; it exits afterwards")
        self._thread = None
        self._logger.info("Inactivity sweeper stopped")

    def _run(self, stop_event: threading.Event) -> None:
        while not stop_event.wait(self._interval_ms / 1000):
            self.sweep()
