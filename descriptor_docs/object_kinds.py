from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ObjectKind(str, Enum):
    """The object kinds that ship a metaschema."""

    RULESET = 'opensspm.ruleset'
    DATASET_CONTRACT = 'opensspm.dataset_contract'
    CONNECTOR_MANIFEST = 'opensspm.connector_manifest'
    PROFILE = 'opensspm.profile'
    DICTIONARY = 'opensspm.dictionary'

    @property
    def schema_file(self) -> str:
        return f"{self.value}.schema.json"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def from_value(cls, value: str) -> Optional['ObjectKind']:
        try:
            return cls(value)
        except ValueError:
            return None

    def example(self, descriptor: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the first compiled object of this kind from the descriptor."""
        if not isinstance(descriptor, dict):
            return None
        if self is ObjectKind.DICTIONARY:
            entry = descriptor.get('dictionary')
        else:
            entries = descriptor.get(_DESCRIPTOR_LISTS[self]) or []
            entry = entries[0] if entries else None
        if not isinstance(entry, dict):
            return None
        return entry.get('object') or None


_LABELS = {
    ObjectKind.RULESET: 'Ruleset',
    ObjectKind.DATASET_CONTRACT: 'Dataset contract',
    ObjectKind.CONNECTOR_MANIFEST: 'Connector manifest',
    ObjectKind.PROFILE: 'Profile',
    ObjectKind.DICTIONARY: 'Dictionary',
}

_DESCRIPTOR_LISTS = {
    ObjectKind.RULESET: 'rulesets',
    ObjectKind.DATASET_CONTRACT: 'dataset_contracts',
    ObjectKind.CONNECTOR_MANIFEST: 'connectors',
    ObjectKind.PROFILE: 'profiles',
}
