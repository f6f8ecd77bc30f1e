"""
Metadata annotations for classes and fields.

Class-level annotations are attached with the :func:`annotate` decorator and
live in the decorated class's own namespace, so they are never picked up
through plain attribute inheritance; hierarchy walks are done explicitly by
the reflection helpers. Field-level annotations are the extras of a
``typing.Annotated[...]`` declaration::

    @annotate(XmlSeeAlso(value=(Report,)))
    class Vehicle:
        wheels: Annotated[int, XmlElement(name="number_of_wheels")] = 0
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Iterable, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict

CLASS_METADATA_ATTR = "__mirrah_metadata__"

T = TypeVar("T")


class Annotation(BaseModel):
    """Base for typed, immutable annotation records.

    Any object can be used as an annotation; subclassing this gives
    validated key/value fields and value equality for free.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ElementType(Enum):
    """Where an annotation is declared."""

    TYPE = "type"
    FIELD = "field"
    METHOD = "method"
    PARAMETER = "parameter"


def annotate(*annotations: Any) -> Callable[[Type[T]], Type[T]]:
    """Class decorator attaching metadata annotations to the decorated class.

    Stacked decorators accumulate; the innermost decorator's annotations
    come first.
    """

    def decorator(cls: Type[T]) -> Type[T]:
        existing = cls.__dict__.get(CLASS_METADATA_ATTR, ())
        setattr(cls, CLASS_METADATA_ATTR, tuple(existing) + tuple(annotations))
        return cls

    return decorator


def class_metadata(cls: type) -> Tuple[Any, ...]:
    """Annotations declared on ``cls`` itself, not on its ancestors."""
    return tuple(vars(cls).get(CLASS_METADATA_ATTR, ()))


def find_annotation(annotation_type: Type[T], metadata: Iterable[Any]) -> Optional[T]:
    for item in metadata:
        if isinstance(item, annotation_type):
            return item
    return None
