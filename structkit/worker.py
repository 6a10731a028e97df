"""A key-value store whose writes are applied by a single background thread."""

from __future__ import annotations

import argparse
import logging
import queue
import threading
from dataclasses import dataclass, field

_log = logging.getLogger(__name__)


class WorkerClosedError(RuntimeError):
    """The worker has been closed."""


@dataclass
class _Task:
    key: bytes
    value: bytes | None = None
    done: threading.Event = field(default_factory=threading.Event)

    @property
    def is_delete(self) -> bool:
        return self.value is None


_CLOSE = object()


class MiniWorker:
    """Reads go straight to the map; puts and deletes go through a writer thread."""

    def __init__(self) -> None:
        self._data: dict[bytes, bytes] = {}
        self._data_lock = threading.Lock()
        self._tasks: queue.Queue = queue.Queue()
        self._state_lock = threading.Lock()
        self._closed = False
        self._thread = threading.Thread(target=self._run, name="mini-worker", daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while True:
            task = self._tasks.get()
            if task is _CLOSE:
                _log.info("[Close] Worker is closing.")
                return
            with self._data_lock:
                if task.is_delete:
                    self._data.pop(task.key, None)
                else:
                    self._data[task.key] = task.value
            task.done.set()

    def _check_closed(self) -> None:
        if self._closed:
            raise WorkerClosedError("Worker is closed")

    def _submit(self, task: _Task) -> None:
        with self._state_lock:
            self._check_closed()
            self._tasks.put(task)
        task.done.wait()

    def get(self, key: bytes) -> bytes | None:
        """Return the value stored under ``key``, or None."""
        self._check_closed()
        with self._data_lock:
            return self._data.get(bytes(key))

    def put(self, key: bytes, value: bytes) -> None:
        """Store ``value`` under ``key`` and wait until it is applied."""
        self._submit(_Task(bytes(key), bytes(value)))

    def delete(self, key: bytes) -> None:
        """Remove ``key`` and wait until it is applied."""
        self._submit(_Task(bytes(key)))

    def close(self) -> None:
        """Stop the writer thread; raise WorkerClosedError if already closed."""
        with self._state_lock:
            self._check_closed()
            self._closed = True
            self._tasks.put(_CLOSE)
        self._thread.join()

    def __enter__(self) -> MiniWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        if not self._closed:
            self.close()

    def __del__(self) -> None:
        if getattr(self, "_closed", True):
            return
        _log.warning("Worker is not closed, try to close it.")
        self._closed = True
        self._tasks.put(_CLOSE)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Store one key and read it back.")
    parser.add_argument("--key", default="hello")
    parser.add_argument("--value", default="world")
    args = parser.parse_args(argv)

    with MiniWorker() as worker:
        worker.put(args.key.encode(), args.value.encode())
        print(worker.get(args.key.encode()))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())