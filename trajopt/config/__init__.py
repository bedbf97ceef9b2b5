"""Configuration collection for solver parameters."""

from trajopt.config.collector import (
    FIELD_SPECS,
    FIELDS_BY_NAME,
    ConfigurationCollector,
    FieldSpec,
    ParameterFields,
)

__all__ = [
    "FIELD_SPECS",
    "FIELDS_BY_NAME",
    "ConfigurationCollector",
    "FieldSpec",
    "ParameterFields",
]
