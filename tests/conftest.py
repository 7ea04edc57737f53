"""Shared fixtures: a small compiled descriptor and its metaschemas."""
import json
from pathlib import Path

import pytest

from descriptor_docs.context import DocsContext
from descriptor_docs.object_kinds import ObjectKind

ROW_SCHEMA = {
    "type": "object",
    "required": ["id"],
    "properties": {
        "id": {"type": "string", "description": "User id."},
        "mfa_enabled": {"type": "boolean"},
        "groups": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {"name": {"type": "string"}},
            },
        },
    },
}

DESCRIPTOR = {
    "schema_version": 1,
    "kind": "opensspm.descriptor",
    "version": {"spec_version": "0.3.0", "schema_version": 1},
    "dictionary": {
        "source_path": "specs/dictionary.yaml",
        "hash": "sha256:dict",
        "object": {"dictionary": {"enums": {"severity": ["critical", "high", "low"], "check_type": ["manual.attestation"]}}},
    },
    "rulesets": [
        {
            "source_path": "specs/rulesets/okta.yaml",
            "hash": "sha256:rs1",
            "object": {
                "ruleset": {
                    "key": "cis.okta.v1",
                    "name": "CIS Okta Benchmark",
                    "scope": {"kind": "connector_instance", "connector_kind": "okta"},
                    "source": {"name": "CIS", "version": "1.0.0", "date": "2025-01-01"},
                    "rules": [
                        {
                            "key": "okta.mfa",
                            "name": "Require MFA",
                            "summary": "All users have MFA enabled.",
                            "severity": "high",
                            "monitoring": {"status": "automated"},
                            "check": {"type": "dataset.field_compare"},
                        },
                        {
                            "key": "okta.policy_doc",
                            "name": "Document policy",
                            "summary": "A written <policy> exists.",
                            "severity": "low",
                            "monitoring": {"status": "manual"},
                            "check": {"type": "manual.attestation"},
                        },
                    ],
                }
            },
        }
    ],
    "dataset_contracts": [
        {
            "source_path": "specs/datasets/okta_users.yaml",
            "hash": "sha256:ds1",
            "object": {
                "dataset": {
                    "key": "okta.users",
                    "version": 1,
                    "description": "Okta user accounts.",
                    "primary_key": "id",
                    "schema": ROW_SCHEMA,
                }
            },
        }
    ],
    "connectors": [
        {
            "source_path": "specs/connectors/okta.yaml",
            "hash": "sha256:co1",
            "object": {
                "connector": {
                    "kind": "okta",
                    "name": "Okta",
                    "provides": [{"dataset": "okta.users", "version": 1}],
                }
            },
        }
    ],
    "profiles": [
        {
            "source_path": "specs/profiles/baseline.yaml",
            "hash": "sha256:pr1",
            "object": {
                "profile": {
                    "key": "baseline",
                    "name": "Baseline",
                    "description": "Minimum controls.",
                    "rulesets": [{"key": "cis.okta.v1", "version": "1.0.0"}],
                }
            },
        }
    ],
    "index": {
        "artifacts": {
            "artifacts": [
                {"kind": "ruleset", "key": "cis.okta.v1", "source_path": "specs/rulesets/okta.yaml", "hash": "sha256:rs1"},
                {"kind": "profile", "key": "baseline", "source_path": "specs/profiles/baseline.yaml", "hash": "sha256:pr1"},
            ]
        },
        "requirements": {
            "rulesets": [
                {
                    "ruleset_key": "cis.okta.v1",
                    "scope": {"kind": "connector_instance", "connector_kind": "okta"},
                    "check_types": ["dataset.field_compare"],
                    "datasets": [{"dataset": "okta.users", "version": 1}],
                }
            ]
        },
    },
}


def _metaschema(title, root_key):
    return {
        "title": title,
        "description": f"Metaschema for {title}.",
        "type": "object",
        "required": ["schema_version", root_key],
        "properties": {
            "schema_version": {"const": 1},
            root_key: {"$ref": f"#/$defs/{root_key}"},
        },
        "$defs": {
            root_key: {
                "type": "object",
                "additionalProperties": False,
                "required": ["key"],
                "properties": {
                    "key": {"type": "string", "pattern": "^[a-z.]+$", "description": "Stable key."},
                    "tags": {"type": "array", "items": {"type": "string"}, "uniqueItems": True},
                },
            }
        },
    }


SCHEMAS = {
    ObjectKind.RULESET: _metaschema("Ruleset", "ruleset"),
    ObjectKind.DATASET_CONTRACT: _metaschema("Dataset contract", "dataset"),
    ObjectKind.CONNECTOR_MANIFEST: _metaschema("Connector manifest", "connector"),
    ObjectKind.PROFILE: _metaschema("Profile", "profile"),
    ObjectKind.DICTIONARY: _metaschema("Dictionary", "dictionary"),
}


@pytest.fixture
def descriptor():
    return json.loads(json.dumps(DESCRIPTOR))


@pytest.fixture
def schemas():
    return json.loads(json.dumps({kind.value: s for kind, s in SCHEMAS.items()}))


@pytest.fixture
def loaded_ctx(descriptor, schemas):
    ctx = DocsContext()
    ctx.populate(descriptor, {ObjectKind(k): v for k, v in schemas.items()})
    return ctx


@pytest.fixture
def docs_dir(tmp_path: Path, descriptor, schemas) -> Path:
    (tmp_path / "descriptor.v1.json").write_text(json.dumps(descriptor), encoding="utf-8")
    metaschema_dir = tmp_path / "metaschema"
    metaschema_dir.mkdir()
    for value, schema in schemas.items():
        (metaschema_dir / f"{value}.schema.json").write_text(json.dumps(schema), encoding="utf-8")
    return tmp_path
