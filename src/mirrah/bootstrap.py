from __future__ import annotations

import importlib
import sys
from typing import Iterable

from mirrah.core.logger import get_logger
from mirrah.registry import TypeRegistry

logger = get_logger(__name__)


def load_type_modules(modules: Iterable[str], *, reload: bool = False) -> None:
    """Import modules so their ``@register_type`` decorators populate the registry.

    This is the explicit initialisation step for name-based instantiation
    when import fallback is disabled. With ``reload=True`` the registry is
    cleared and the modules are re-imported, which tests use for isolation.
    """

    if reload:
        TypeRegistry.clear()

    for module_name in modules:
        if reload:
            sys.modules.pop(module_name, None)
        importlib.import_module(module_name)
        logger.debug("Loaded type module %s", module_name)
