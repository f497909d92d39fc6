"""
Core building blocks shared by the provider, its data sources and host helpers.

Only leaf modules are re-exported here. :mod:`.context`, :mod:`.registry` and
:mod:`.manifest` depend on higher layers and are imported by their full path.
"""

from .diagnostics import AttributePath, Diagnostic, Diagnostics, Severity
from .logging import bind_fields, bind_tags, configure_logging, get_logger, log_progress, mask_secret
from .schema import Attribute, AttributeType, SchemaDeclaration, SchemaError
from .values import UNKNOWN, UnknownValue, is_unknown

__all__ = [
    "Attribute",
    "AttributePath",
    "AttributeType",
    "Diagnostic",
    "Diagnostics",
    "SchemaDeclaration",
    "SchemaError",
    "Severity",
    "UNKNOWN",
    "UnknownValue",
    "bind_fields",
    "bind_tags",
    "configure_logging",
    "get_logger",
    "is_unknown",
    "log_progress",
    "mask_secret",
]
