"""
Tk control panel for the waypoint trajectory solver.

One window: a Recalculate button, the seven solver fields, a blue rule and
a read-only output pane. Solves run on the invoker's worker thread; the
Tk adapters below let the invoker talk to the widgets.
"""
from __future__ import annotations

import queue
import tkinter as tk
from tkinter import scrolledtext, ttk
from typing import Any, Callable

from trajopt import is_ipopt_available
from trajopt.api.request import OptimizationRequest
from trajopt.config.collector import FIELD_SPECS, FieldSpec
from trajopt.logging import configure_logging, get_logger
from trajopt.orchestration.invoker import InvocationResult, SolverInvoker, SolverRoutine
from trajopt.optimization.solver import run_trajectory_optimization

log = get_logger(__name__)


class TkParameterCollector:
    """Collector backed by Tk variables.

    Entries are held as text so a half-typed value can be read; anything
    that does not parse falls back to the last value that did.
    """

    def __init__(self, master: tk.Misc):
        self.specs: dict[str, FieldSpec] = {spec.name: spec for spec in FIELD_SPECS}
        self.variables = self._create_variables(master)
        self._last_good: dict[str, Any] = {name: spec.default for name, spec in self.specs.items()}

    def _create_variables(self, master: tk.Misc) -> dict[str, tk.Variable]:
        variables: dict[str, tk.Variable] = {}
        for name, spec in self.specs.items():
            if spec.kind is bool:
                variables[name] = tk.BooleanVar(master, value=spec.default)
            else:
                variables[name] = tk.StringVar(master, value=str(spec.default))
        return variables

    def read(self, name: str) -> Any:
        spec = self.specs[name]
        raw = self.variables[name].get()
        try:
            value = spec.coerce(raw)
        except (TypeError, ValueError):
            log.warning(
                "Cannot read %s from %r; using %r", name, raw, self._last_good[name],
            )
            return self._last_good[name]
        self._last_good[name] = value
        return value

    def snapshot(self) -> OptimizationRequest:
        return OptimizationRequest(**{name: self.read(name) for name in self.specs})


class TkButtonControl:
    def __init__(self, button: ttk.Button):
        self.button = button

    def is_enabled(self) -> bool:
        return str(self.button.cget("state")) != "disabled"

    def set_enabled(self, enabled: bool) -> None:
        self.button.config(state="normal" if enabled else "disabled")


class TkTextDisplay:
    """Read-only text widget the report is written into."""

    def __init__(self, text: tk.Text):
        self.text = text

    def show(self, text: str) -> None:
        self.text.configure(state="normal")
        self.text.delete("1.0", tk.END)
        self.text.insert(tk.END, text)
        self.text.configure(state="disabled")


class TkDispatcher:
    """Run calls from any thread on the Tk event loop.

    Tk may only be touched from the thread that created it, so other threads
    enqueue work and the loop drains the queue every ``interval_ms``.
    """

    def __init__(self, root: tk.Misc, interval_ms: int = 50):
        self.root = root
        self.interval_ms = interval_ms
        self._pending: queue.SimpleQueue = queue.SimpleQueue()
        self._closed = False
        self._after_id = root.after(interval_ms, self._drain)

    def __call__(self, fn: Callable[..., Any], *args: Any) -> None:
        if self._closed:
            log.debug("Dropped %s: Tk root is gone", getattr(fn, "__name__", fn))
            return
        self._pending.put((fn, args))

    def _drain(self) -> None:
        try:
            while True:
                try:
                    fn, args = self._pending.get_nowait()
                except queue.Empty:
                    break
                fn(*args)
        finally:
            self._schedule()

    def _schedule(self) -> None:
        if self._closed:
            return
        try:
            self._after_id = self.root.after(self.interval_ms, self._drain)
        except (tk.TclError, RuntimeError) as exc:
            # Root destroyed or main loop gone.
            log.debug("Stopped polling: %s", exc)
            self._closed = True

    def close(self) -> None:
        self._closed = True
        try:
            self.root.after_cancel(self._after_id)
        except tk.TclError as exc:
            log.debug("Poll already cancelled: %s", exc)


class TrajectoryOptimizationGUI:
    """Main window for running the waypoint trajectory solver."""

    def __init__(self, root: tk.Tk, routine: SolverRoutine | None = None):
        self.root = root
        self.root.title("Trajectory Optimization")
        self.root.geometry("720x800")

        self.collector = TkParameterCollector(root)
        self.variables = self.collector.variables

        self._create_widgets()
        self._layout_widgets()

        self.dispatcher = TkDispatcher(root)

        self.invoker = SolverInvoker(
            routine or run_trajectory_optimization,
            control=TkButtonControl(self.recalculate_button),
            display=TkTextDisplay(self.output_text),
            dispatch=self.dispatcher,
            on_delivered=self._on_delivered,
        )

        self.root.protocol("WM_DELETE_WINDOW", self._on_close)
        log.info("Trajectory optimization GUI initialized")

    def _create_widgets(self):
        """Create all GUI widgets."""
        self.main_frame = ttk.Frame(self.root, padding="10")

        self.recalculate_button = ttk.Button(
            self.main_frame, text="Recalculate", command=self._recalculate,
        )

        self.fields_frame = ttk.Frame(self.main_frame)
        self.field_widgets: dict[str, tk.Widget] = {}
        for spec in FIELD_SPECS:
            if spec.kind is bool:
                widget = ttk.Checkbutton(
                    self.fields_frame, text=spec.label, variable=self.variables[spec.name],
                )
            else:
                widget = ttk.Entry(
                    self.fields_frame, textvariable=self.variables[spec.name], width=12,
                )
            self.field_widgets[spec.name] = widget

        self.separator = tk.Frame(self.main_frame, height=6, background="blue")

        self.output_text = scrolledtext.ScrolledText(
            self.main_frame, wrap=tk.NONE, font=("Courier", 8), state="disabled",
        )

    def _layout_widgets(self):
        self.main_frame.pack(fill=tk.BOTH, expand=True)
        self.recalculate_button.pack(fill=tk.X)
        self.fields_frame.pack(fill=tk.X, pady=(5, 5))

        for row, spec in enumerate(FIELD_SPECS):
            widget = self.field_widgets[spec.name]
            if spec.kind is bool:
                widget.grid(row=row, column=0, columnspan=2, sticky=tk.W, pady=2)
            else:
                ttk.Label(self.fields_frame, text=spec.label).grid(
                    row=row, column=0, sticky=tk.W, pady=2,
                )
                widget.grid(row=row, column=1, sticky=tk.W, padx=(5, 0), pady=2)

        self.separator.pack(fill=tk.X, pady=(5, 5))
        self.output_text.pack(fill=tk.BOTH, expand=True)

    def _recalculate(self):
        """Start a solve with the current field values."""
        return self.invoker.trigger(self.collector)

    def _on_delivered(self, result: InvocationResult) -> None:
        if result.ok:
            self.root.bell()

    def _on_close(self):
        self.invoker.shutdown(wait=False)
        self.dispatcher.close()
        self.root.destroy()


def main() -> None:
    """Start the trajectory optimization panel."""
    configure_logging()
    if not is_ipopt_available():
        log.warning("Solves will fail until an Ipopt-enabled CasADi is installed")
    root = tk.Tk()
    TrajectoryOptimizationGUI(root)
    root.mainloop()


if __name__ == "__main__":
    main()
