"""
Configuration collection for solver parameters.

A collector owns the current value of each of the seven solver fields and
produces an immutable :class:`OptimizationRequest` snapshot on demand.
Values are checked by type only; range checking happens later, when the
request is validated before solving.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Protocol, Sequence, runtime_checkable

from trajopt.api.request import OptimizationRequest
from trajopt.logging import get_logger

log = get_logger(__name__)

_TRUE_STRINGS = {"1", "true", "yes", "on"}
_FALSE_STRINGS = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class FieldSpec:
    """Description of one editable field."""

    name: str
    kind: type
    default: Any
    label: str

    def coerce(self, value: Any) -> Any:
        """Convert *value* to this field's type or raise ``ValueError``."""
        if self.kind is bool:
            return coerce_bool(value)
        if self.kind is int:
            return coerce_int(value)
        if self.kind is float:
            return float(value)
        raise TypeError(f"Unsupported field kind {self.kind!r}")


def coerce_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Not a boolean: {value!r}")
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"Not a boolean: {value!r}")


def coerce_int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError(f"Not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Not an integer: {value!r}")
        return int(value)
    return int(str(value).strip())


_DEFAULTS = OptimizationRequest()

# Panel display order: the three entries, then the four flags.
FIELD_SPECS: tuple[FieldSpec, ...] = (
    FieldSpec("iterations", int, _DEFAULTS.iterations, "iterations"),
    FieldSpec("tolerance", float, _DEFAULTS.tolerance, "tolerance"),
    FieldSpec("print_level", int, _DEFAULTS.print_level, "print_level"),
    FieldSpec("adaptive_mu_strategy", bool, _DEFAULTS.adaptive_mu_strategy, "adaptive_mu_strategy"),
    FieldSpec("hessian_approximation", bool, _DEFAULTS.hessian_approximation, "hessian_approximation"),
    FieldSpec("sparse_forward", bool, _DEFAULTS.sparse_forward, "sparse_forward"),
    FieldSpec("sparse_reverse", bool, _DEFAULTS.sparse_reverse, "sparse_reverse"),
)

FIELDS_BY_NAME: Dict[str, FieldSpec] = {spec.name: spec for spec in FIELD_SPECS}


@runtime_checkable
class ConfigurationCollector(Protocol):
    """Anything that can produce the current request snapshot."""

    def snapshot(self) -> OptimizationRequest:
        ...


class ParameterFields:
    """In-memory collector, pre-populated with the field defaults."""

    def __init__(self, specs: Sequence[FieldSpec] = FIELD_SPECS):
        self.specs = {spec.name: spec for spec in specs}
        self._values: Dict[str, Any] = {}
        self.reset()

    def reset(self) -> None:
        """Restore every field to its default."""
        self._values = {name: spec.default for name, spec in self.specs.items()}

    def get(self, name: str) -> Any:
        return self._values[self._spec(name).name]

    def set(self, name: str, value: Any) -> None:
        """Set *name* from *value*, coercing by field type.

        Raises ``ValueError`` (and keeps the old value) when *value* does not
        parse as the field's type or *name* is unknown.
        """
        spec = self._spec(name)
        try:
            coerced = spec.coerce(value)
        except (TypeError, ValueError) as exc:
            log.debug("Rejected %r for %s: %s", value, name, exc)
            raise ValueError(f"Invalid value for {name}: {value!r}") from exc
        self._values[name] = coerced

    def update(self, **values: Any) -> None:
        for name, value in values.items():
            self.set(name, value)

    def snapshot(self) -> OptimizationRequest:
        return OptimizationRequest(**self._values)

    def _spec(self, name: str) -> FieldSpec:
        try:
            return self.specs[name]
        except KeyError:
            raise ValueError(f"Unknown field: {name}") from None
