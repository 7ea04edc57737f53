from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .object_kinds import ObjectKind


class DocsNotLoadedError(Exception):
    """Raised when a view is rendered before the docs data is loaded."""


@dataclass
class DocsContext:
    """Per-session state: the loaded artifacts and the current filter text.

    Created empty, populated once by `populate`, read thereafter.
    """

    descriptor: Optional[Dict[str, Any]] = None
    schemas: Dict[ObjectKind, Dict[str, Any]] = field(default_factory=dict)
    query: str = ''

    @property
    def loaded(self) -> bool:
        return self.descriptor is not None

    def populate(self, descriptor: Dict[str, Any], schemas: Dict[ObjectKind, Dict[str, Any]]) -> None:
        if self.loaded:
            raise RuntimeError("Docs context is already populated.")
        self.descriptor = descriptor
        self.schemas = dict(schemas)

    def get_descriptor(self) -> Dict[str, Any]:
        if self.descriptor is None:
            raise DocsNotLoadedError("descriptor not loaded")
        return self.descriptor

    def get_schema(self, kind: ObjectKind) -> Optional[Dict[str, Any]]:
        return self.schemas.get(kind)

    @property
    def spec_version(self) -> str:
        version = (self.descriptor or {}).get('version') or {}
        return str(version.get('spec_version') or '?')
