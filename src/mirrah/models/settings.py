from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReflectionSettings(BaseModel):
    """Behaviour switches for :class:`mirrah.reflection.Reflection`."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    force_access: bool = True                   # Allow reads/writes of _private fields
    import_fallback: bool = True                # Resolve names missing from the registry via importlib
    validate_assignment: bool = False           # Strict pydantic validation of written values
    path_separator: str = Field(default=".", min_length=1)  # Separator for nested field paths
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR"]] = None  # None keeps the current level
