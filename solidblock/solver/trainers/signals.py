"""Interactive stop/save requests delivered to a running trainer."""

from __future__ import annotations

import asyncio


class TrainingSignals:
    """
    Flags set from any thread and read by the trainer only at episode boundaries.

    `post` hops onto the bound event loop with `call_soon_threadsafe`, so the
    flags are only ever written from the loop thread.
    """

    COMMANDS = ("stop", "save")

    def __init__(self) -> None:
        self.stop_requested = False
        self.save_requested = False
        self._loop: asyncio.AbstractEventLoop | None = None

    def bind(self, loop: asyncio.AbstractEventLoop) -> None:
        self._loop = loop

    def request_stop(self) -> None:
        self.stop_requested = True

    def request_save(self) -> None:
        self.save_requested = True

    def consume_save(self) -> bool:
        requested = self.save_requested
        self.save_requested = False
        return requested

    def post(self, command: str) -> bool:
        """Deliver `stop` or `save`; returns False for anything else."""
        handler = {"stop": self.request_stop, "save": self.request_save}.get(command)
        if handler is None:
            return False
        loop = self._loop
        if loop is not None and not loop.is_closed():
            loop.call_soon_threadsafe(handler)
        else:
            handler()
        return True


def parse_command(line: str) -> str | None:
    """Map a line of console input to a signal: blank or `q` stops, `s` saves."""
    key = line.strip().lower()
    if key in {"", "q", "stop"}:
        return "stop"
    if key in {"s", "save"}:
        return "save"
    return None


__all__ = ["TrainingSignals", "parse_command"]
