"""mirrah.

Reflection helpers for Python classes: hierarchy walks, zero-argument
instantiation by class or qualified name, declared-field listings,
metadata annotations and field reads/writes including dotted paths.

Public API for clients using this library.
"""

from mirrah.core.annotations import Annotation, ElementType, annotate
from mirrah.core.exceptions import (
    FieldAccessError,
    FieldNotFoundError,
    InstantiationError,
    MirrahException,
    TypeRegistryError,
    TypeResolutionError,
)
from mirrah.core.fields import FieldDescriptor
from mirrah.core.logger import configure_logging
from mirrah.bootstrap import load_type_modules
from mirrah.models.settings import ReflectionSettings
from mirrah.registry import TypeRegistry, register_type
from mirrah.reflection import (
    Reflection,
    create_instance,
    fields,
    fields_with_annotation,
    get_annotation,
    get_annotation_on_class,
    get_annotation_on_field,
    get_declared_field,
    get_value_from_field,
    has_declared_field,
    hierarchy,
    resolve_type,
    set_value_on_field,
)

__version__ = "0.1.0"

__all__ = [
    "Annotation",
    "ElementType",
    "FieldAccessError",
    "FieldDescriptor",
    "FieldNotFoundError",
    "InstantiationError",
    "MirrahException",
    "Reflection",
    "ReflectionSettings",
    "TypeRegistry",
    "TypeRegistryError",
    "TypeResolutionError",
    "annotate",
    "configure_logging",
    "create_instance",
    "fields",
    "fields_with_annotation",
    "get_annotation",
    "get_annotation_on_class",
    "get_annotation_on_field",
    "get_declared_field",
    "get_value_from_field",
    "has_declared_field",
    "hierarchy",
    "load_type_modules",
    "register_type",
    "resolve_type",
    "set_value_on_field",
]
