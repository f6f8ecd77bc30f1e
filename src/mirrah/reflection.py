"""
Reflection helpers.

Convenience functions over Python's own introspection: walking a class
hierarchy, instantiating classes by reference or qualified name, listing
declared fields, finding metadata annotations and reading/writing field
values, including ``_private`` fields and dotted paths such as
``engine.aspiration.type``.

Given the hierarchy::

       object
         |
      Vehicle
      |     |
     Car  Motorcycle

``hierarchy(Car)`` returns ``[Car, Vehicle, object]`` and
``fields(Car, include_inherited=True)`` lists Car's own fields followed by
Vehicle's.

Pure lookups are module-level functions. Operations whose behaviour depends
on :class:`ReflectionSettings` are methods of :class:`Reflection`; the
module-level versions of those use a default instance.
"""

from __future__ import annotations

import builtins
import importlib
import inspect
from typing import Any, Iterable, List, Optional, Type, TypeVar, Union

from pydantic import ConfigDict, ValidationError, create_model

from mirrah.core.annotations import ElementType, class_metadata, find_annotation
from mirrah.core.exceptions import (
    FieldAccessError,
    FieldNotFoundError,
    InstantiationError,
    TypeResolutionError,
)
from mirrah.core.fields import FieldDescriptor, declared_fields
from mirrah.core.logger import configure_logging, get_logger
from mirrah.models.settings import ReflectionSettings
from mirrah.registry import TypeRegistry, normalize_name

logger = get_logger(__name__)

T = TypeVar("T")

TypeOrTypes = Union[None, type, Iterable[type]]


def _type_name(cls: Any) -> str:
    return getattr(cls, "__qualname__", repr(cls))


# -----------------
# Hierarchy and fields
# -----------------


def hierarchy(cls: Optional[type]) -> List[type]:
    """All classes in the hierarchy of ``cls``, from itself up to and including ``object``.

    Follows the method resolution order, so multiple inheritance yields one
    linear, duplicate-free sequence. ``None`` yields an empty list.
    """
    if cls is None:
        return []
    return list(cls.__mro__)


def fields(target: TypeOrTypes, include_inherited: bool = False) -> List[FieldDescriptor]:
    """Fields of a class, or of each class in an iterable of classes.

    For a single class, ``include_inherited`` selects between its own
    declared fields and those of its whole hierarchy. For an iterable the
    declared fields of each class are concatenated in input order, so::

        fields(hierarchy(Foo)) == fields(Foo, include_inherited=True)

    Fields are not de-duplicated; a shadowed field appears once per
    declaring class. ``None`` is treated as a class with no hierarchy.
    """
    if target is None:
        classes = []
    elif isinstance(target, type):
        classes = hierarchy(target) if include_inherited else [target]
    else:
        classes = list(target)

    found: List[FieldDescriptor] = []
    for cls in classes:
        found.extend(declared_fields(cls))
    return found


def fields_with_annotation(annotation_type: type, target: TypeOrTypes) -> List[FieldDescriptor]:
    """Fields carrying an ``annotation_type`` annotation.

    A single class (or ``None``) is expanded to its whole hierarchy.
    """
    classes = hierarchy(target) if target is None or isinstance(target, type) else target
    return [f for f in fields(classes) if f.has_annotation(annotation_type)]


# -----------------
# Annotations
# -----------------


def get_annotation(
    annotation_type: Type[T], cls: type, target: Union[ElementType, str]
) -> Optional[T]:
    """Gets an annotation declared either on the class (TYPE) or on one of its fields (FIELD).

    Any other target yields ``None``.
    """
    try:
        element = ElementType(target)
    except ValueError:
        return None

    if element is ElementType.FIELD:
        return get_annotation_on_field(annotation_type, cls)
    if element is ElementType.TYPE:
        return get_annotation_on_class(annotation_type, cls)
    return None


def get_annotation_on_class(annotation_type: Type[T], cls: type) -> Optional[T]:
    """First class-level annotation of the given type, walking up from ``cls``."""
    for node in hierarchy(cls):
        found = find_annotation(annotation_type, class_metadata(node))
        if found is not None:
            return found
    return None


def get_annotation_on_field(annotation_type: Type[T], cls: type) -> Optional[T]:
    """First field-level annotation of the given type across the hierarchy of ``cls``."""
    for field in fields(cls, include_inherited=True):
        found = field.get_annotation(annotation_type)
        if found is not None:
            return found
    return None


# -----------------
# Field lookup
# -----------------


def _find_field(cls: Optional[type], field_name: str) -> Optional[FieldDescriptor]:
    for field in fields(hierarchy(cls)):
        if field.matches(field_name):
            return field
    return None


def get_declared_field(cls: type, field_name: str) -> FieldDescriptor:
    """Gets a declared field by name from the hierarchy of ``cls``.

    Raises:
        FieldNotFoundError: if no class in the hierarchy declares the field
    """
    field = _find_field(cls, field_name)
    if field is None:
        raise FieldNotFoundError(
            f"No field named {field_name!r} on type {_type_name(cls)}",
            details={"field": field_name, "type": _type_name(cls)},
        )
    return field


def has_declared_field(cls: type, field_name: str) -> bool:
    """True if a class in the hierarchy of ``cls`` declares ``field_name``."""
    return _find_field(cls, field_name) is not None


# -----------------
# Type resolution
# -----------------


def _import_attribute_path(name: str) -> Any:
    """Import the longest importable module prefix of ``name`` and walk the rest as attributes."""
    parts = name.split(".")

    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            target = importlib.import_module(module_name)
        except ModuleNotFoundError as exc:
            # Only a missing prefix means "try a shorter one"; anything else is a broken module
            if exc.name and (module_name == exc.name or module_name.startswith(exc.name + ".")):
                continue
            raise

        for attribute in parts[split:]:
            target = getattr(target, attribute)
        return target

    return getattr(builtins, name)


def resolve_type(name: str, *, import_fallback: bool = True) -> type:
    """Resolve a fully qualified class name.

    The :class:`TypeRegistry` is consulted first. Unregistered names are
    imported when ``import_fallback`` is set; nested classes resolve as
    ``pkg.module.Outer.Inner`` (or ``pkg.module.Outer$Inner``).

    Raises:
        TypeResolutionError: if the name does not resolve to a class
    """
    if not isinstance(name, str) or not name.strip():
        raise TypeResolutionError("Type name must be a non-empty string", details={"name": repr(name)})

    key = normalize_name(name)
    resolved: Any = TypeRegistry.try_get(key)

    if resolved is None:
        if not import_fallback:
            raise TypeResolutionError(
                f"Failed to resolve type [{key}]. No type registered under that name.",
                details={"name": key},
            )
        try:
            resolved = _import_attribute_path(key)
        except Exception as exc:
            logger.debug("Import of %s failed: %s", key, exc)
            raise TypeResolutionError(
                f"Failed to resolve type [{key}]. Must be the fully qualified name of an importable class.",
                details={"name": key},
            ) from exc

    if not isinstance(resolved, type):
        raise TypeResolutionError(
            f"Name [{key}] does not refer to a class",
            details={"name": key, "resolved": repr(resolved)},
        )
    logger.debug("Resolved %s to %r", key, resolved)
    return resolved


# -----------------
# Instantiation
# -----------------


def _requires_arguments(cls: type) -> bool:
    try:
        signature = inspect.signature(cls)
    except (TypeError, ValueError):
        # Some builtins expose no signature; let the call decide
        return False

    return any(
        p.default is inspect.Parameter.empty
        and p.kind not in (inspect.Parameter.VAR_POSITIONAL, inspect.Parameter.VAR_KEYWORD)
        for p in signature.parameters.values()
    )


def instantiate(cls: Type[T]) -> T:
    """Create an instance of ``cls`` through its zero-argument constructor.

    Raises:
        InstantiationError: if ``cls`` cannot be called without arguments or its constructor fails
    """
    message = "Failed to create instance of type [{}]. Make sure the class has a no args constructor"

    if not isinstance(cls, type):
        raise InstantiationError(message.format(_type_name(cls)), details={"type": repr(cls)})

    if _requires_arguments(cls):
        raise InstantiationError(message.format(_type_name(cls)), details={"type": _type_name(cls)})

    try:
        return cls()
    except Exception as exc:
        raise InstantiationError(
            message.format(_type_name(cls)), details={"type": _type_name(cls), "error": str(exc)}
        ) from exc


# -----------------
# Settings-bound operations
# -----------------


class Reflection:
    """Reflection helpers bound to a :class:`ReflectionSettings`.

    Usage:
        >>> reflection = Reflection(ReflectionSettings(force_access=False))
        >>> reflection.get_value_from_field("engine.cylinders", car)
        8
    """

    def __init__(self, settings: Optional[ReflectionSettings] = None):
        self.settings = settings or ReflectionSettings()
        if self.settings.log_level is not None:
            configure_logging(self.settings.log_level)

    hierarchy = staticmethod(hierarchy)
    fields = staticmethod(fields)
    fields_with_annotation = staticmethod(fields_with_annotation)
    get_annotation = staticmethod(get_annotation)
    get_annotation_on_class = staticmethod(get_annotation_on_class)
    get_annotation_on_field = staticmethod(get_annotation_on_field)
    get_declared_field = staticmethod(get_declared_field)
    has_declared_field = staticmethod(has_declared_field)

    def resolve_type(self, name: str) -> type:
        return resolve_type(name, import_fallback=self.settings.import_fallback)

    def create_instance(self, target: Union[Type[T], str]) -> T:
        """Create an instance from a class or from its fully qualified name.

        Raises:
            TypeResolutionError: if a name does not resolve to a class
            InstantiationError: if an instance can not be created
        """
        cls = self.resolve_type(target) if isinstance(target, str) else target
        return instantiate(cls)

    def _check_access(self, field: FieldDescriptor, instance: Any, action: str) -> None:
        if not field.is_public and not self.settings.force_access:
            raise FieldAccessError(
                f"Cannot {action} private field {field.name!r} without force_access",
                details={"field": field.name, "type": _type_name(field.declaring_type)},
            )
        if not isinstance(instance, field.declaring_type):
            raise FieldAccessError(
                f"Cannot {action} field {field.name!r}: instance is not a {_type_name(field.declaring_type)}",
                details={"field": field.name, "instance_type": _type_name(type(instance))},
            )

    def _validate(self, field: FieldDescriptor, value: Any) -> None:
        if not self.settings.validate_assignment or isinstance(field.declared_type, str):
            return
        assignment = create_model(
            "FieldAssignment",
            __config__=ConfigDict(arbitrary_types_allowed=True, strict=True),
            value=(field.declared_type, ...),
        )
        try:
            assignment.model_validate({"value": value})
        except ValidationError as exc:
            raise FieldAccessError(
                f"Value rejected for field {field.name!r}",
                details={"field": field.name, "type": _type_name(field.declaring_type), "value": repr(value)},
            ) from exc

    def set_value_on_field(self, field: Union[FieldDescriptor, str], value: Any, instance: Any) -> None:
        """Set ``value`` on a field of ``instance``.

        A field given by name is looked up on the runtime type of ``instance``.

        Raises:
            FieldNotFoundError: if a named field does not exist
            FieldAccessError: if the write is rejected
        """
        if isinstance(field, str):
            field = get_declared_field(type(instance), field)

        self._check_access(field, instance, "set")
        self._validate(field, value)
        try:
            setattr(instance, field.attribute, value)
        except Exception as exc:
            raise FieldAccessError(
                f"Failed to set field {field.name!r} on {_type_name(type(instance))}",
                details={"field": field.name, "type": _type_name(type(instance)), "error": str(exc)},
            ) from exc
        logger.debug("Set %s.%s", _type_name(type(instance)), field.name)

    def _read(self, field: FieldDescriptor, instance: Any) -> Any:
        self._check_access(field, instance, "get")
        try:
            return getattr(instance, field.attribute)
        except Exception as exc:
            raise FieldAccessError(
                f"Failed to get field {field.name!r} from {_type_name(type(instance))}",
                details={"field": field.name, "type": _type_name(type(instance)), "error": str(exc)},
            ) from exc

    def get_value_from_field(self, field: Union[FieldDescriptor, str], instance: Any) -> Any:
        """Get the value of a field of ``instance``.

        A field given by name may be a path like ``engine.aspiration.type``;
        each segment is looked up on the runtime type of the value read for
        the previous one.

        Raises:
            FieldNotFoundError: if any path segment does not exist
            FieldAccessError: if any read is rejected
        """
        if isinstance(field, FieldDescriptor):
            return self._read(field, instance)

        current = instance
        for segment in field.split(self.settings.path_separator):
            descriptor = _find_field(type(current), segment)
            if descriptor is None:
                raise FieldNotFoundError(
                    f"No field named {segment!r} on type {_type_name(type(current))}",
                    details={"field": segment, "type": _type_name(type(current)), "path": field},
                )
            current = self._read(descriptor, current)
        return current


_DEFAULT = Reflection()


def create_instance(target: Union[Type[T], str]) -> T:
    """Create an instance from a class or fully qualified name using default settings."""
    return _DEFAULT.create_instance(target)


def set_value_on_field(field: Union[FieldDescriptor, str], value: Any, instance: Any) -> None:
    """Set a field value on ``instance`` using default settings."""
    _DEFAULT.set_value_on_field(field, value, instance)


def get_value_from_field(field: Union[FieldDescriptor, str], instance: Any) -> Any:
    """Read a field value, or a dotted path of them, from ``instance`` using default settings."""
    return _DEFAULT.get_value_from_field(field, instance)
