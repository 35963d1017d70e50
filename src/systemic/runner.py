"""Run a system as the main job of a process.

The :class:`Runner` starts a system, then turns SIGINT/SIGTERM and errors
that escape to the event loop into a graceful shutdown: the system is stopped
and an exit code is produced (0 for a signal, 1 for an unhandled error).
"""

import asyncio
import logging
import signal
from typing import Any, Iterable, NoReturn, Optional

from systemic.component_map import ComponentMap
from systemic.errors import SystemStateError

__all__ = ["Runner", "run"]

EXIT_OK = 0
EXIT_ERROR = 1


class Runner:
    """Process supervision for a system.

    Args:
        system: The system to run; anything with ``start`` and ``stop`` coroutines.
        logger: Logger for shutdown messages; defaults to this module's logger.
        signals: Signals that request a graceful shutdown.

    Example:
        >>> runner = Runner(system)
        >>> components = await runner.start()
        >>> exit_code = await runner.wait()
    """

    def __init__(
        self,
        system: Any,
        logger: Optional[logging.Logger] = None,
        signals: Iterable[int] = (signal.SIGINT, signal.SIGTERM),
    ):
        if system is None:
            raise ValueError("system is required")
        self.system = system
        self._logger = logger or logging.getLogger(__name__)
        self._signals = tuple(signals)
        self._installed_signals: list[int] = []
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._previous_exception_handler = None
        self._shutdown: Optional[asyncio.Future] = None

    async def start(self) -> ComponentMap:
        """Start the system, then install the shutdown handlers."""
        components = await self.system.start()

        self._loop = asyncio.get_running_loop()
        self._shutdown = self._loop.create_future()
        for sig in self._signals:
            try:
                self._loop.add_signal_handler(sig, self._on_signal, sig)
            except (NotImplementedError, RuntimeError, ValueError):
                self._logger.warning("Cannot handle signal %s on this platform", sig)
            else:
                self._installed_signals.append(sig)
        self._previous_exception_handler = self._loop.get_exception_handler()
        self._loop.set_exception_handler(self._on_unhandled_error)
        return components

    async def stop(self) -> None:
        self._uninstall()
        await self.system.stop()

    async def wait(self) -> int:
        """Wait for a shutdown request, stop the system and return the exit code."""
        if self._shutdown is None:
            raise SystemStateError("Runner must be started before waiting for shutdown")
        code = await self._shutdown
        try:
            await self.stop()
        except Exception:
            self._logger.exception("Error while shutting down")
            code = EXIT_ERROR
        return code

    def request_shutdown(self, code: int = EXIT_OK) -> None:
        """Ask the runner to shut down; only the first request counts."""
        if self._shutdown is not None and not self._shutdown.done():
            self._shutdown.set_result(code)

    def _on_signal(self, sig: int) -> None:
        self._logger.info(
            "Received %s. Attempting to shutdown gracefully.", signal.Signals(sig).name
        )
        self.request_shutdown(EXIT_OK)

    def _on_unhandled_error(self, loop: asyncio.AbstractEventLoop, context: dict) -> None:
        self._logger.error("Unhandled error. Invoking shutdown.")
        exception = context.get("exception")
        if exception is not None:
            self._logger.error(context.get("message", ""), exc_info=exception)
        else:
            self._logger.error(context.get("message", ""))
        self.request_shutdown(EXIT_ERROR)

    def _uninstall(self) -> None:
        if self._loop is None:
            return
        for sig in self._installed_signals:
            self._loop.remove_signal_handler(sig)
        self._installed_signals = []
        self._loop.set_exception_handler(self._previous_exception_handler)
        self._loop = None


def run(system: Any, logger: Optional[logging.Logger] = None) -> NoReturn:
    """Start ``system``, block until shutdown is requested, then exit the process."""

    async def main() -> int:
        runner = Runner(system, logger)
        await runner.start()
        return await runner.wait()

    raise SystemExit(asyncio.run(main()))
