from __future__ import annotations

from typing import Callable, ClassVar, Dict, List, Optional, Type, TypeVar

from mirrah.core.exceptions import TypeRegistryError

T = TypeVar("T")


def qualified_name(cls: type) -> str:
    return f"{cls.__module__}.{cls.__qualname__}"


def normalize_name(name: str) -> str:
    """Accept ``Outer$Inner`` as a spelling of ``Outer.Inner``."""
    return name.strip().replace("$", ".")


class TypeRegistry:
    """Process-wide mapping from qualified name to class.

    Populated by the host program, usually through :func:`register_type`
    decorators imported via :func:`mirrah.bootstrap.load_type_modules`.
    """

    _registry: ClassVar[Dict[str, type]] = {}

    @classmethod
    def register(
        cls,
        type_class: type,
        *,
        name: Optional[str] = None,
        overwrite: bool = False,
    ) -> str:
        if not isinstance(type_class, type):
            raise TypeRegistryError(
                "Only classes can be registered", details={"value": repr(type_class)}
            )
        key = normalize_name(name or qualified_name(type_class))
        if not overwrite and key in cls._registry and cls._registry[key] is not type_class:
            existing = cls._registry[key]
            raise TypeRegistryError(
                f"Type already registered for name={key!r}: {existing}",
                details={"name": key},
            )
        cls._registry[key] = type_class
        return key

    @classmethod
    def get(cls, name: str) -> type:
        key = normalize_name(name)
        try:
            return cls._registry[key]
        except KeyError as exc:
            raise TypeRegistryError(
                f"No type registered for name={key!r}", details={"name": key}
            ) from exc

    @classmethod
    def try_get(cls, name: str) -> Optional[type]:
        return cls._registry.get(normalize_name(name))

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._registry)

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


def register_type(
    name: Optional[str] = None,
    *,
    overwrite: bool = False,
) -> Callable[[Type[T]], Type[T]]:
    def decorator(type_class: Type[T]) -> Type[T]:
        TypeRegistry.register(type_class, name=name, overwrite=overwrite)
        return type_class

    return decorator
