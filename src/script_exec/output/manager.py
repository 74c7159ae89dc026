"""Single consumer thread that owns all rendering side effects."""

from __future__ import annotations

import logging
import queue
import threading
from types import TracebackType

from script_exec.executor.models import Completed, Error, LifecycleEvent, Queued, Terminate
from script_exec.output.printers import Printer

logger = logging.getLogger(__name__)


class OutputManager:
    """Drains the event channel in receipt order and dispatches to a printer.

    Workers call :meth:`send` from any thread. Only the consumer thread touches
    the printer, so printers need no locking. :meth:`close` must be called after
    the worker pool has joined; it sends the single ``Terminate`` and waits for
    the printer to finalize.
    """

    def __init__(self, printer: Printer) -> None:
        self._printer = printer
        self._events: queue.SimpleQueue[LifecycleEvent] = queue.SimpleQueue()
        self._thread: threading.Thread | None = None
        self._closed = False
        self._failure: BaseException | None = None

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(
            target=self._consume,
            daemon=True,
            name="script-exec-output",
        )
        self._thread.start()

    def send(self, event: LifecycleEvent) -> None:
        """Enqueue an event; never blocks the producer."""

        self._events.put(event)

    def close(self) -> None:
        """Terminate the consumer and re-raise any printer failure."""

        if self._closed:
            return
        self._closed = True
        self.send(Terminate())
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        if self._failure is not None:
            raise self._failure

    def __enter__(self) -> OutputManager:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def _consume(self) -> None:
        while True:
            event = self._events.get()
            try:
                self._dispatch(event)
            except Exception as error:
                logger.exception("Printer failed on %s", type(event).__name__)
                if self._failure is None:
                    self._failure = error
            if isinstance(event, Terminate):
                return

    def _dispatch(self, event: LifecycleEvent) -> None:
        match event:
            case Queued(title=title):
                self._printer.on_queued(title)
            case Completed(title=title, success=success, duration=duration, output=output):
                self._printer.on_completed(title, success, duration, output)
            case Error(title=title, message=message):
                self._printer.on_error(title, message)
            case Terminate():
                self._printer.on_terminate()
