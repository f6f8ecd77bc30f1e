from __future__ import annotations

import dataclasses
import inspect
import re
import sys
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar, Dict, List, Optional, Tuple, Type, TypeVar, get_origin

from mirrah.core.annotations import find_annotation

T = TypeVar("T")

# Unevaluated annotations such as "ClassVar[int]", "dataclasses.InitVar[int]" or "Annotated[int, Meta()]"
_STRING_CLASS_LEVEL = re.compile(r"^\s*(?:typing\.|t\.|dataclasses\.)?(?:ClassVar|InitVar)\b")
_STRING_ANNOTATED = re.compile(r"^\s*(?:typing\.|t\.|typing_extensions\.)?Annotated\[(.*)\]\s*$", re.DOTALL)
_SLOT_INTERNALS = frozenset({"__dict__", "__weakref__"})


@dataclass(frozen=True)
class FieldDescriptor:
    """One field declared on a class.

    ``name`` is the field name as written in source; ``attribute`` is the
    name it is stored under on instances, which differs only for
    name-mangled ``__private`` fields.
    """

    name: str
    attribute: str
    declared_type: Any
    declaring_type: type
    metadata: Tuple[Any, ...] = ()

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")

    def get_annotation(self, annotation_type: Type[T]) -> Optional[T]:
        return find_annotation(annotation_type, self.metadata)

    def has_annotation(self, annotation_type: type) -> bool:
        return self.get_annotation(annotation_type) is not None

    def matches(self, field_name: str) -> bool:
        return field_name == self.name or field_name == self.attribute

    def __repr__(self) -> str:
        return f"FieldDescriptor({self.declaring_type.__qualname__}.{self.name})"


@dataclass(frozen=True)
class _PartialAnnotated:
    """A string ``Annotated[...]`` whose type could not be evaluated but whose extras could."""

    origin: str
    metadata: Tuple[Any, ...]


def _namespaces(cls: type) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    module = sys.modules.get(cls.__module__)
    globalns = dict(getattr(module, "__dict__", {}))
    localns = dict(vars(cls))
    localns.setdefault(cls.__name__, cls)
    return globalns, localns


def _split_arguments(text: str) -> List[str]:
    """Split ``text`` on commas that are not nested in brackets or quotes."""
    parts: List[str] = []
    depth = 0
    quote: Optional[str] = None
    start = 0
    for i, ch in enumerate(text):
        if quote:
            if ch == quote and text[i - 1] != "\\":
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch in "([{":
            depth += 1
        elif ch in ")]}":
            depth -= 1
        elif ch == "," and depth == 0:
            parts.append(text[start:i])
            start = i + 1
    parts.append(text[start:])
    return [p.strip() for p in parts if p.strip()]


def _evaluate_partially(annotation: str, globalns: Dict[str, Any], localns: Dict[str, Any]) -> Any:
    match = _STRING_ANNOTATED.match(annotation)
    if match is None:
        return annotation
    arguments = _split_arguments(match.group(1))
    if len(arguments) < 2:
        return annotation

    metadata = []
    for argument in arguments[1:]:
        try:
            metadata.append(eval(argument, globalns, localns))
        except Exception:
            metadata.append(argument)
    return _PartialAnnotated(origin=arguments[0], metadata=tuple(metadata))


def _evaluate(annotation: Any, globalns: Dict[str, Any], localns: Dict[str, Any]) -> Any:
    """Evaluate one annotation; what cannot be evaluated stays a string."""
    if not isinstance(annotation, str):
        return annotation
    try:
        return eval(annotation, globalns, localns)
    except Exception:
        return _evaluate_partially(annotation, globalns, localns)


def _is_class_level(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return bool(_STRING_CLASS_LEVEL.match(annotation))
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    return isinstance(annotation, dataclasses.InitVar)


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _mangle_prefix(cls: type) -> Optional[str]:
    stripped = cls.__name__.lstrip("_")
    return f"_{stripped}__" if stripped else None


def _demangle(cls: type, attribute: str) -> str:
    prefix = _mangle_prefix(cls)
    if prefix and attribute.startswith(prefix) and len(attribute) > len(prefix):
        return "__" + attribute[len(prefix):]
    return attribute


def _mangle(cls: type, name: str) -> str:
    prefix = _mangle_prefix(cls)
    if prefix and name.startswith("__") and not name.endswith("__"):
        return prefix + name[2:]
    return name


def _split_annotated(annotation: Any) -> Tuple[Any, Tuple[Any, ...]]:
    if isinstance(annotation, _PartialAnnotated):
        return annotation.origin, annotation.metadata
    if get_origin(annotation) is Annotated:
        return annotation.__origin__, tuple(annotation.__metadata__)
    return annotation, ()


def _own_slots(cls: type) -> List[str]:
    slots = vars(cls).get("__slots__", ())
    if isinstance(slots, str):
        slots = (slots,)
    return [s for s in slots if s not in _SLOT_INTERNALS]


def declared_fields(cls: type) -> List[FieldDescriptor]:
    """Fields declared directly on ``cls``, in declaration order.

    Annotated class attributes come first (``ClassVar``, ``InitVar`` and
    dunder names excluded), followed by any ``__slots__`` entries that
    carry no annotation.
    """
    fields: List[FieldDescriptor] = []
    seen = set()

    globalns, localns = _namespaces(cls)
    for attribute, raw in inspect.get_annotations(cls).items():
        if _is_dunder(attribute):
            continue
        annotation = _evaluate(raw, globalns, localns)
        if _is_class_level(annotation):
            continue
        declared_type, metadata = _split_annotated(annotation)
        fields.append(
            FieldDescriptor(
                name=_demangle(cls, attribute),
                attribute=attribute,
                declared_type=declared_type,
                declaring_type=cls,
                metadata=metadata,
            )
        )
        seen.add(attribute)

    for slot in _own_slots(cls):
        attribute = _mangle(cls, slot)
        if attribute in seen:
            continue
        fields.append(
            FieldDescriptor(name=slot, attribute=attribute, declared_type=Any, declaring_type=cls)
        )
        seen.add(attribute)

    return fields
