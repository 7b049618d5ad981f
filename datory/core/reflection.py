"""
Property reflection: enumerates the declared properties of a record type.

A declared property is either an annotated attribute or a ``property``
descriptor defined somewhere in the type's MRO. Decorations are read from
``Annotated`` metadata (for descriptors, from the getter's return annotation).
"""
import inspect
import logging
import types
import typing
from typing import Annotated, Any, ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

_SKIPPED_PACKAGES = {"builtins", "abc", "typing", "typing_extensions", "pydantic", "pydantic_settings"}


class PropertyInfo(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    name: str
    value_type: Any                 # Annotated and Optional unwrapped
    markers: tuple = ()
    nullable: bool = False
    can_read: bool = True
    can_write: bool = True

    def find_marker(self, marker_type):
        """Return the first decoration of the given type, or None."""
        for marker in self.markers:
            if isinstance(marker, marker_type):
                return marker
        return None

    def has_marker(self, marker_type) -> bool:
        return self.find_marker(marker_type) is not None


def unwrap_annotation(annotation) -> tuple[Any, tuple, bool]:
    """
    Split a declared annotation into (value type, decorations, nullable).
    Handles ``Annotated[Optional[X], ...]`` and ``Optional[Annotated[X, ...]]``.
    """
    markers: list = []
    nullable = False
    while True:
        if typing.get_origin(annotation) is Annotated:
            markers.extend(annotation.__metadata__)
            annotation = annotation.__origin__
            continue
        origin = typing.get_origin(annotation)
        if origin is Union or origin is types.UnionType:
            args = [a for a in typing.get_args(annotation) if a is not type(None)]
            if len(args) < len(typing.get_args(annotation)) and len(args) == 1:
                nullable = True
                annotation = args[0]
                continue
        return annotation, tuple(markers), nullable


def _is_class_var(annotation) -> bool:
    if annotation is ClassVar:
        return True
    return typing.get_origin(annotation) is ClassVar


def _declaring_classes(cls) -> list[type]:
    """Classes in the MRO that carry user declarations, base first."""
    return [
        klass for klass in reversed(cls.__mro__)
        if klass.__module__.split(".")[0] not in _SKIPPED_PACKAGES
    ]


def _annotations_of(klass) -> dict[str, Any]:
    try:
        return inspect.get_annotations(klass, eval_str=True)
    except (NameError, SyntaxError, TypeError) as e:
        # Unresolvable forward refs: fall back to the raw strings.
        logger.debug("Could not evaluate annotations of %s: %s", klass.__qualname__, e)
        return inspect.get_annotations(klass)


def _property_annotation(prop: property):
    if prop.fget is None:
        return Any
    try:
        hints = inspect.get_annotations(prop.fget, eval_str=True)
    except (NameError, SyntaxError, TypeError):
        hints = inspect.get_annotations(prop.fget)
    return hints.get("return", Any)


def _build(name: str, annotation, can_read: bool = True, can_write: bool = True) -> PropertyInfo:
    value_type, markers, nullable = unwrap_annotation(annotation)
    return PropertyInfo(
        name=name,
        value_type=value_type,
        markers=markers,
        nullable=nullable,
        can_read=can_read,
        can_write=can_write,
    )


def _is_frozen(cls) -> bool:
    """Frozen pydantic models and dataclasses refuse attribute assignment."""
    config = getattr(cls, "model_config", None)
    if isinstance(config, dict) and config.get("frozen"):
        return True
    params = getattr(cls, "__dataclass_params__", None)
    return bool(params is not None and params.frozen)


def _frozen_fields(cls) -> set[str]:
    """Pydantic fields declared with ``Field(frozen=True)``."""
    fields = getattr(cls, "model_fields", None)
    if not isinstance(fields, dict):
        return set()
    return {name for name, info in fields.items() if getattr(info, "frozen", None)}


def reflect_properties(cls) -> list[PropertyInfo]:
    """
    Enumerate every declared property of ``cls`` in declaration order,
    including non-public ones. Annotated attributes come first, then
    ``property`` descriptors. A redeclared name keeps its first position
    and takes the most-derived declaration.

    Descriptors are listed after every annotated attribute, so within a class
    a descriptor column always follows the annotated columns regardless of
    where it sits in the class body.
    """
    writable = not _is_frozen(cls)
    frozen_fields = _frozen_fields(cls)
    fields: dict[str, PropertyInfo] = {}
    descriptors: dict[str, PropertyInfo] = {}
    for klass in _declaring_classes(cls):
        for name, annotation in _annotations_of(klass).items():
            if name.startswith("__") or _is_class_var(annotation):
                continue
            fields[name] = _build(name, annotation, can_write=writable and name not in frozen_fields)
        for name, member in vars(klass).items():
            if isinstance(member, property) and not name.startswith("__"):
                descriptors[name] = _build(
                    name,
                    _property_annotation(member),
                    can_read=member.fget is not None,
                    can_write=member.fset is not None,
                )

    for name, info in descriptors.items():
        # A descriptor overriding an annotated field replaces it in place.
        fields[name] = info
    return list(fields.values())


def find_property(properties: list[PropertyInfo], name: str) -> Optional[PropertyInfo]:
    for info in properties:
        if info.name == name:
            return info
    return None
