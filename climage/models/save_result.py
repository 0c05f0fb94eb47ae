from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class SaveResult:
    """
    Outcome of ImageService.save(). Truthy on success, so callers can
    keep treating it as a boolean.
    """
    success: bool
    filename: str = ""
    message: str = ""

    def __bool__(self) -> bool:
        return self.success
