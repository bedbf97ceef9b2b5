from __future__ import annotations

import time

import pytest

tk = pytest.importorskip("tkinter")

from trajopt.gui.panel import (  # noqa: E402
    TkParameterCollector,
    TrajectoryOptimizationGUI,
)


@pytest.fixture
def root():
    try:
        root = tk.Tk()
    except tk.TclError as exc:
        pytest.skip(f"No display available: {exc}")
    root.withdraw()
    yield root
    try:
        root.destroy()
    except tk.TclError:
        pass


def _pump(root, predicate, timeout=5.0):
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("Timed out waiting for the Tk event loop")
        root.update()
        time.sleep(0.01)


def _output(gui) -> str:
    return gui.output_text.get("1.0", "end-1c")


def test_collector_defaults(root) -> None:
    collector = TkParameterCollector(root)
    assert collector.snapshot().as_args() == (100, 1e-3, True, True, True, True, 0)


def test_collector_keeps_last_good_value(root, caplog) -> None:
    collector = TkParameterCollector(root)
    collector.variables["iterations"].set("250")
    assert collector.snapshot().iterations == 250
    collector.variables["iterations"].set("25o")
    assert collector.snapshot().iterations == 250
    assert "iterations" in caplog.text


def test_recalculate_round_trip(root) -> None:
    calls = []

    def routine(*args):
        calls.append(args)
        return "solver says hi"

    gui = TrajectoryOptimizationGUI(root, routine=routine)
    try:
        gui.variables["iterations"].set("50")
        gui.variables["sparse_reverse"].set(False)

        future = gui._recalculate()

        assert future is not None
        assert str(gui.recalculate_button.cget("state")) == "disabled"
        assert _output(gui) == "Recalculating"
        _pump(root, lambda: future.done() and str(gui.recalculate_button.cget("state")) != "disabled")
        assert _output(gui) == "solver says hi"
        assert calls == [(50, 1e-3, True, True, True, False, 0)]
    finally:
        gui.invoker.shutdown(wait=True)


def test_invalid_fields_are_rejected_in_panel(root) -> None:
    gui = TrajectoryOptimizationGUI(root, routine=lambda *args: "unused")
    try:
        gui.variables["tolerance"].set("-1")
        future = gui._recalculate()
        assert future.done()
        assert _output(gui).startswith("Invalid parameters:")
        assert str(gui.recalculate_button.cget("state")) != "disabled"
    finally:
        gui.invoker.shutdown(wait=True)


def test_dispatcher_runs_calls_from_worker_threads(root) -> None:
    import threading

    from trajopt.gui.panel import TkDispatcher

    dispatcher = TkDispatcher(root, interval_ms=10)
    seen = []
    worker = threading.Thread(target=dispatcher, args=(seen.append, "from worker"))
    worker.start()
    worker.join()
    _pump(root, lambda: seen == ["from worker"])
    dispatcher.close()
    dispatcher(seen.append, "after close")
    root.update()
    assert seen == ["from worker"]


def test_close_shuts_down_and_destroys(root) -> None:
    gui = TrajectoryOptimizationGUI(root, routine=lambda *args: "unused")
    gui._on_close()
    assert not gui.invoker.display_alive
    with pytest.raises(tk.TclError):
        root.winfo_exists()
