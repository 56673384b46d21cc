"""Virtual connection for testing -- a :class:`Connection` with no real device.

Input is fed directly with :meth:`VirtualConnection.feed` (decoded and
dispatched synchronously) or queued with :meth:`VirtualConnection.queue_input`
for a read loop running in :meth:`open_blocking`. All output is captured for
assertions.
"""

from __future__ import annotations

import queue

from termline.connection import Connection, Signal, Size


class VirtualConnection(Connection):
    """In-memory connection that records all writes for test inspection.

    Parameters
    ----------
    width:
        Number of terminal columns.
    height:
        Number of terminal rows.
    capabilities:
        Terminfo capability names :meth:`put` accepts.
    """

    def __init__(
        self,
        width: int = 80,
        height: int = 24,
        capabilities: tuple[str, ...] = (),
        encoding: str = "utf-8",
    ) -> None:
        super().__init__(encoding)
        self.width = width
        self.height = height
        self.capabilities = capabilities
        self.restore_count = 0
        self._output: list[bytes] = []
        self._inbox: queue.Queue[bytes | None] = queue.Queue()

    # -- input ----------------------------------------------------------------

    def feed(self, data: str | bytes) -> None:
        """Decode and dispatch *data* on the calling thread."""
        if isinstance(data, str):
            data = data.encode(self.encoding)
        self._decoder.write(data)

    def end(self) -> None:
        """Simulate end of input outside a read loop."""
        self._decoder.flush()
        self.close()

    def queue_input(self, data: bytes) -> None:
        """Hand *data* to the read loop; ``b""`` means end of input."""
        self._inbox.put(data)

    # -- device hooks ---------------------------------------------------------

    def _read(self) -> bytes | None:
        return self._inbox.get()

    def _wakeup(self) -> None:
        self._inbox.put(None)

    def _write(self, data: bytes) -> None:
        self._output.append(data)

    def _restore(self) -> None:
        self.restore_count += 1

    # -- queries --------------------------------------------------------------

    def size(self) -> Size:
        return Size(self.width, self.height)

    def terminal_type(self) -> str:
        return "virtual"

    def put(self, capability: str, *params: int) -> bool:
        if capability not in self.capabilities:
            return False
        self.write(f"<{capability}{''.join(f':{p}' for p in params)}>")
        return True

    # -- test helpers ---------------------------------------------------------

    def resize(self, width: int, height: int | None = None) -> None:
        self.width = width
        if height is not None:
            self.height = height
        self.raise_signal(Signal.WINCH)

    def get_output(self) -> str:
        return b"".join(self._output).decode(self.encoding)

    def clear_output(self) -> None:
        self._output.clear()
