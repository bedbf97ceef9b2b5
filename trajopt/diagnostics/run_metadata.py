import json
import time
import uuid
from pathlib import Path
from typing import Any

import numpy as np

# A unique identifier for this Python process/run. Used to name artifacts.
RUN_ID: str = f"{int(time.time())}-{uuid.uuid4().hex[:8]}"


def _jsonable(value: Any) -> Any:
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.generic):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def log_run_metadata(meta: dict, folder: str | Path = "runs") -> str:
    """Write run metadata JSON for one solve.

    NumPy arrays and scalars are converted to plain lists and numbers.
    Returns the path to the JSON file for convenience.
    """
    out_dir = Path(folder)
    out_dir.mkdir(parents=True, exist_ok=True)
    out_path = out_dir / f"{RUN_ID}.json"
    with out_path.open("w", encoding="utf-8") as f:
        json.dump({"run_id": RUN_ID, **meta}, f, indent=2, default=_jsonable)
    return str(out_path)
