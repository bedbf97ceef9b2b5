"""Diagnostics and run metadata utilities.

Exports the per-process run identifier and the metadata writer.
"""

from .run_metadata import RUN_ID, log_run_metadata  # noqa: F401
