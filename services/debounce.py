"""Cancellable delayed recomputation for live text analysis."""
import asyncio
import logging
from typing import Any, Callable, Optional

from core.constants import TEXT_ANALYSIS_DEBOUNCE_DELAY

logger = logging.getLogger(__name__)


class Debouncer:
    """Run ``func`` on the latest submitted value once input has been stable for ``delay`` seconds.

    A new value cancels the pending computation. Submitting the value that is
    already pending keeps the running task, so repeated calls are harmless.
    ``on_result(value, result)`` only fires for computations that were not superseded.
    Errors raised by ``func`` or ``on_result`` are logged and the task resolves to None.
    """

    def __init__(
        self,
        func: Callable[[Any], Any],
        on_result: Callable[[Any, Any], None],
        delay: float = TEXT_ANALYSIS_DEBOUNCE_DELAY,
    ):
        self.func = func
        self.on_result = on_result
        self.delay = delay
        self._task: Optional[asyncio.Task] = None
        self._value: Any = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, value: Any) -> asyncio.Task:
        """Schedule a computation for ``value``. Must be called from a running event loop."""
        if self.pending and value == self._value:
            return self._task
        self.cancel()
        self._value = value
        self._task = asyncio.get_running_loop().create_task(self._run(value))
        return self._task

    def cancel(self) -> None:
        if self.pending:
            logger.debug("Superseding pending analysis")
            self._task.cancel()

    async def _run(self, value: Any) -> Any:
        await asyncio.sleep(self.delay)
        if self._task is not asyncio.current_task():
            return None
        try:
            result = self.func(value)
            self.on_result(value, result)
        except Exception as e:
            logger.error(f"Error in debounced analysis: {e}", exc_info=True)
            return None
        return result
