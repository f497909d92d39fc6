"""
Static schema declarations for the provider and its data sources.

A :class:`SchemaDeclaration` lists the attributes a block accepts and produces.
Declarations are built once at import time and checked for internal
consistency on construction; a broken declaration is a programming error and
raises :class:`SchemaError` immediately rather than surfacing as a diagnostic.

Two validation passes run against a declaration at runtime:

* :meth:`SchemaDeclaration.validate_config` checks host-supplied configuration
  before any remote call is made.
* :meth:`SchemaDeclaration.validate_state` checks a mapped state document
  before it is handed back to the host.

Both return :class:`~tmdb_provider.core.diagnostics.Diagnostics` instead of
raising.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from .diagnostics import AttributePath, Diagnostics
from .values import is_unknown


class SchemaError(ValueError):
    """Raised when a schema declaration is internally inconsistent."""


class AttributeType(str, Enum):
    INT = "int64"
    STRING = "string"
    LIST_NESTED = "list_nested"


@dataclass(frozen=True, slots=True)
class Attribute:
    """
    A single schema attribute.

    Parameters
    ----------
    name:
        Wire-visible attribute name.
    type:
        Scalar type or :attr:`AttributeType.LIST_NESTED`.
    required:
        The host must supply a non-null value.
    optional:
        The host may supply a value.
    computed:
        The value is produced by the read. Never combined with ``required``.
    sensitive:
        The value must not be displayed by the host.
    min_length:
        Minimum string length for ``STRING`` attributes supplied as input.
    nested:
        Attributes of each list element for ``LIST_NESTED`` attributes.
    """

    name: str
    type: AttributeType
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    description: str = ""
    min_length: Optional[int] = None
    nested: Tuple["Attribute", ...] = ()

    @property
    def accepts_input(self) -> bool:
        return self.required or self.optional

    def validate(self) -> None:
        if self.required and (self.optional or self.computed):
            raise SchemaError(f"Attribute '{self.name}' cannot be required and optional/computed at the same time.")
        if not (self.required or self.optional or self.computed):
            raise SchemaError(f"Attribute '{self.name}' must be required, optional or computed.")
        if self.type is AttributeType.LIST_NESTED:
            if not self.nested:
                raise SchemaError(f"Nested attribute '{self.name}' declares no element attributes.")
            _check_unique(self.nested, owner=self.name)
            for child in self.nested:
                child.validate()
        elif self.nested:
            raise SchemaError(f"Scalar attribute '{self.name}' cannot declare nested attributes.")
        if self.min_length is not None and self.type is not AttributeType.STRING:
            raise SchemaError(f"Attribute '{self.name}' declares min_length but is not a string.")

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "type": self.type.value,
            "required": self.required,
            "optional": self.optional,
            "computed": self.computed,
        }
        if self.sensitive:
            payload["sensitive"] = True
        if self.description:
            payload["description"] = self.description
        if self.nested:
            payload["nested"] = {child.name: child.to_dict() for child in self.nested}
        return payload


@dataclass(frozen=True, slots=True)
class SchemaDeclaration:
    """Immutable description of a provider or data source block."""

    attributes: Tuple[Attribute, ...]
    description: str = ""
    _index: Mapping[str, Attribute] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        _check_unique(self.attributes, owner="<root>")
        for attribute in self.attributes:
            attribute.validate()
        object.__setattr__(self, "_index", {attribute.name: attribute for attribute in self.attributes})

    def __getitem__(self, name: str) -> Attribute:
        return self._index[name]

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"attributes": {attribute.name: attribute.to_dict() for attribute in self.attributes}}
        if self.description:
            payload["description"] = self.description
        return payload

    def validate_config(self, config: Mapping[str, Any], *, allow_unknown: bool = False) -> Diagnostics:
        """
        Check host-supplied configuration against the declaration.

        Parameters
        ----------
        config:
            Attribute name to value. ``None`` means null, :data:`~tmdb_provider.core.values.UNKNOWN`
            means the host cannot resolve the value yet.
        allow_unknown:
            Leave unknown values for the caller to handle instead of reporting them.
        """

        diagnostics = Diagnostics()
        for name in config:
            if name not in self._index:
                diagnostics.add_attribute_error(
                    AttributePath.root(str(name)),
                    "Unsupported Argument",
                    f'An argument named "{name}" is not expected here.',
                )

        for attribute in self.attributes:
            path = AttributePath.root(attribute.name)
            value = config.get(attribute.name)

            if not attribute.accepts_input:
                if value is not None:
                    diagnostics.add_attribute_error(
                        path,
                        "Invalid Configuration for Read-Only Attribute",
                        f'Cannot set value for attribute "{attribute.name}" as it is computed by the data source.',
                    )
                continue

            if value is None:
                if attribute.required:
                    diagnostics.add_attribute_error(
                        path,
                        "Missing Configuration for Required Attribute",
                        f'The argument "{attribute.name}" is required, but no definition was found.',
                    )
                continue

            if is_unknown(value):
                if not allow_unknown:
                    diagnostics.add_attribute_error(
                        path,
                        "Unknown Configuration Value",
                        f'The value of "{attribute.name}" is not known yet. Data sources can only be read once every argument is known.',
                    )
                continue

            if not _matches_scalar(attribute.type, value):
                diagnostics.add_attribute_error(
                    path,
                    "Incorrect Attribute Value Type",
                    f'Attribute "{attribute.name}" expects a value of type {attribute.type.value}, got {type(value).__name__}.',
                )
                continue

            if attribute.min_length is not None and len(value) < attribute.min_length:
                diagnostics.add_attribute_error(
                    path,
                    "Invalid Attribute Value Length",
                    f"Attribute {attribute.name} string length must be at least {attribute.min_length}, got: {len(value)}",
                )
        return diagnostics

    def validate_state(self, state: Mapping[str, Any]) -> Diagnostics:
        """Check that a mapped state document has exactly the declared shape."""

        diagnostics = Diagnostics()
        _check_object(self.attributes, state, None, diagnostics)
        return diagnostics


def _check_unique(attributes: Sequence[Attribute], *, owner: str) -> None:
    seen: set[str] = set()
    for attribute in attributes:
        if attribute.name in seen:
            raise SchemaError(f"Duplicate attribute '{attribute.name}' in '{owner}'.")
        seen.add(attribute.name)


def _matches_scalar(kind: AttributeType, value: Any) -> bool:
    if kind is AttributeType.INT:
        return isinstance(value, int) and not isinstance(value, bool)
    if kind is AttributeType.STRING:
        return isinstance(value, str)
    return False


def _child_path(parent: Optional[AttributePath], name: str) -> AttributePath:
    return parent.attr(name) if parent else AttributePath.root(name)


def _check_object(
    attributes: Sequence[Attribute],
    payload: Mapping[str, Any],
    parent: Optional[AttributePath],
    diagnostics: Diagnostics,
) -> None:
    declared = {attribute.name for attribute in attributes}
    for name in payload:
        if name not in declared:
            diagnostics.add_attribute_error(
                _child_path(parent, str(name)),
                "Value Conversion Error",
                f'State contains undeclared attribute "{name}".',
            )

    for attribute in attributes:
        path = _child_path(parent, attribute.name)
        if attribute.name not in payload:
            diagnostics.add_attribute_error(path, "Value Conversion Error", f'State is missing attribute "{attribute.name}".')
            continue
        value = payload[attribute.name]
        if value is None:
            continue
        if attribute.type is AttributeType.LIST_NESTED:
            if not isinstance(value, list):
                diagnostics.add_attribute_error(path, "Value Conversion Error", f'Attribute "{attribute.name}" must be a list.')
                continue
            for position, element in enumerate(value):
                element_path = path.index(position)
                if not isinstance(element, Mapping):
                    diagnostics.add_attribute_error(element_path, "Value Conversion Error", "List elements must be objects.")
                    continue
                _check_object(attribute.nested, element, element_path, diagnostics)
        elif not _matches_scalar(attribute.type, value):
            diagnostics.add_attribute_error(
                path,
                "Value Conversion Error",
                f'Attribute "{attribute.name}" expects {attribute.type.value}, got {type(value).__name__}.',
            )
