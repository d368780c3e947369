"""
Error classes for clearer exception sources.

Combat math itself never raises; these cover the edges where the engine
reads data it does not own (catalog files, stored pet documents).
"""
from __future__ import annotations

class PetverseError(Exception):
    pass

class CatalogLoadError(PetverseError):
    def __init__(self, path: str, detail: str):
        super().__init__(f"Failed to load catalog {path}: {detail}")
        self.path = path
        self.detail = detail

class ValidationError(PetverseError):
    def __init__(self, field: str, detail: str):
        super().__init__(f"Invalid pet document field '{field}': {detail}")
        self.field = field
        self.detail = detail
