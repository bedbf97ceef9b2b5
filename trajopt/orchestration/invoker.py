"""
Solver invocation off the interaction thread.

The invoker owns the hand-off between the panel and the solver routine:

1. the trigger control is disabled on the calling thread, before anything
   is submitted;
2. the request is validated and rejected without calling the routine when
   it is out of range;
3. exactly one routine call runs on a dedicated single-worker executor;
4. the outcome is dispatched back to the interaction thread, written to the
   display only while the display is alive, and the control is re-enabled
   whatever the outcome.
"""

from __future__ import annotations

import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Protocol, runtime_checkable

from trajopt.api.request import OptimizationRequest
from trajopt.config.collector import ConfigurationCollector
from trajopt.errors import InvalidRequestError
from trajopt.logging import get_logger
from trajopt.optimization.solver import run_trajectory_optimization

log = get_logger(__name__)

SolverRoutine = Callable[[int, float, bool, bool, bool, bool, int], str]
Dispatcher = Callable[..., Any]


@runtime_checkable
class TriggerControl(Protocol):
    """The control that starts a solve (the Recalculate button)."""

    def is_enabled(self) -> bool:
        ...

    def set_enabled(self, enabled: bool) -> None:
        ...


@runtime_checkable
class DisplaySurface(Protocol):
    """Where report text is written."""

    def show(self, text: str) -> None:
        ...


def call_directly(fn: Callable[..., Any], *args: Any) -> None:
    fn(*args)


class InvocationStatus(Enum):
    """Outcome of one invocation."""

    COMPLETED = "completed"
    REJECTED = "rejected"
    FAILED = "failed"


@dataclass(frozen=True)
class InvocationResult:
    status: InvocationStatus
    text: str
    error: BaseException | None = None
    elapsed_s: float = 0.0

    @property
    def ok(self) -> bool:
        return self.status is InvocationStatus.COMPLETED


class LivenessToken:
    """Set while the display may still be written to."""

    def __init__(self) -> None:
        self._alive = threading.Event()
        self._alive.set()

    @property
    def alive(self) -> bool:
        return self._alive.is_set()

    def revoke(self) -> None:
        self._alive.clear()


class SolverInvoker:
    """Run the solver routine for one request at a time.

    Args:
        routine: Seven-argument solver call returning the report text.
        control: Trigger control, disabled for the duration of a solve.
        display: Surface the report (or error text) is written to.
        dispatch: ``dispatch(fn, *args)`` runs ``fn`` on the interaction
            thread. Defaults to calling ``fn`` immediately.
        validate_requests: Reject out-of-range requests before solving.
        pending_text: Shown while a solve is running.
        on_delivered: Called with the result after it reached the display.
    """

    def __init__(
        self,
        routine: SolverRoutine = run_trajectory_optimization,
        *,
        control: TriggerControl,
        display: DisplaySurface,
        dispatch: Dispatcher | None = None,
        validate_requests: bool = True,
        pending_text: str = "Recalculating",
        on_delivered: Callable[[InvocationResult], None] | None = None,
    ):
        self.routine = routine
        self.control = control
        self.display = display
        self.dispatch = dispatch or call_directly
        self.validate_requests = validate_requests
        self.pending_text = pending_text
        self.on_delivered = on_delivered
        self._token = LivenessToken()
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="trajopt-solver")
        self._lock = threading.Lock()
        self._in_flight = 0

    # -- Public API --------------------------------------------------------

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._in_flight > 0

    @property
    def display_alive(self) -> bool:
        return self._token.alive

    def trigger(self, collector: ConfigurationCollector) -> Future[InvocationResult] | None:
        """Snapshot *collector* and invoke the routine with it."""
        if not self.control.is_enabled():
            log.debug("Trigger ignored: control is disabled")
            return None
        return self.invoke(collector.snapshot())

    def invoke(self, request: OptimizationRequest) -> Future[InvocationResult] | None:
        """Start one solve for *request*.

        Returns ``None`` when the control is disabled, otherwise a future
        resolving to the :class:`InvocationResult`. Must be called from the
        interaction thread.
        """
        if not self.control.is_enabled():
            log.debug("Invocation ignored: control is disabled")
            return None

        self.control.set_enabled(False)
        self._write(self.pending_text)

        if self.validate_requests:
            try:
                request.validate()
            except InvalidRequestError as exc:
                log.warning("Rejected request %s: %s", request, exc)
                result = InvocationResult(
                    InvocationStatus.REJECTED, f"Invalid parameters: {exc}", error=exc,
                )
                self._complete(result)
                return _resolved(result)

        with self._lock:
            self._in_flight += 1
        try:
            return self._executor.submit(self._work, request)
        except RuntimeError as exc:
            # Executor already shut down.
            with self._lock:
                self._in_flight -= 1
            log.error("Cannot start solve: %s", exc)
            result = InvocationResult(
                InvocationStatus.FAILED, f"Optimization failed: {exc}", error=exc,
            )
            self._complete(result)
            return _resolved(result)

    def detach_display(self) -> None:
        """Stop writing to the display; later deliveries are dropped."""
        self._token.revoke()

    def shutdown(self, wait: bool = True, cancel_futures: bool = True) -> None:
        """Detach the display and shut the worker down.

        A solve already running is not interrupted; with ``wait`` the call
        blocks until it returns.
        """
        self.detach_display()
        self._executor.shutdown(wait=wait, cancel_futures=cancel_futures)
        log.debug("Solver invoker shut down (wait=%s)", wait)

    # -- Worker side -------------------------------------------------------

    def _work(self, request: OptimizationRequest) -> InvocationResult:
        start = time.perf_counter()
        try:
            text = self.routine(*request.as_args())
        except Exception as exc:
            log.exception("Optimization failed for %s", request)
            result = InvocationResult(
                InvocationStatus.FAILED,
                f"Optimization failed: {exc}",
                error=exc,
                elapsed_s=time.perf_counter() - start,
            )
        else:
            result = InvocationResult(
                InvocationStatus.COMPLETED, text, elapsed_s=time.perf_counter() - start,
            )
            log.info("Optimization completed in %.3f s", result.elapsed_s)

        self.dispatch(self._finish, result)
        return result

    # -- Interaction side --------------------------------------------------

    def _finish(self, result: InvocationResult) -> None:
        try:
            self._complete(result)
        finally:
            with self._lock:
                self._in_flight -= 1

    def _complete(self, result: InvocationResult) -> None:
        try:
            if self._write(result.text) and self.on_delivered is not None:
                self.on_delivered(result)
        except Exception:
            log.exception("Could not deliver %s result", result.status.value)
        finally:
            self.control.set_enabled(True)

    def _write(self, text: str) -> bool:
        if not self._token.alive:
            log.debug("Display detached; dropped %d characters", len(text))
            return False
        self.display.show(text)
        return True


def _resolved(result: InvocationResult) -> Future[InvocationResult]:
    future: Future[InvocationResult] = Future()
    future.set_result(result)
    return future
