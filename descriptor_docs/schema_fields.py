from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Set

from .pointers import resolve_json_pointer

DETAILS_SEPARATOR = ' · '
ARRAY_ITEM_DESCRIPTION = 'Array item.'


def _is_set(value: Any) -> bool:
    # Empty containers count as present; None, False, 0 and '' do not.
    if value is None or value is False or value == '':
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0:
        return False
    return True


def format_scalar(value: Any) -> str:
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def encode_literal(value: Any) -> str:
    """Compact JSON encoding used for const/enum/default values."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return json.dumps(value, ensure_ascii=False, separators=(',', ':'))


def deref(schema: Any, root: Any, seen: Optional[Set[str]] = None) -> Any:
    """Follow `$ref` chains inside `root`.

    `seen` collects the refs followed so far on this chain and is updated in
    place. A ref already in `seen`, or one that does not resolve, leaves the
    node as it is.
    """
    if seen is None:
        seen = set()
    if not isinstance(schema, dict):
        return schema
    ref = schema.get('$ref')
    if not isinstance(ref, str) or not ref:
        return schema
    if ref in seen:
        return schema
    seen.add(ref)
    resolved = resolve_json_pointer(root, ref)
    if resolved is None:
        return schema
    return deref(resolved, root, seen)


def infer_type(schema: Any) -> str:
    if not isinstance(schema, dict):
        return 'unknown'
    if 'const' in schema:
        return 'const'
    schema_type = schema.get('type')
    if isinstance(schema_type, list):
        return ' | '.join(str(t) for t in schema_type)
    if isinstance(schema_type, str):
        return schema_type
    if _is_set(schema.get('properties')):
        return 'object'
    if _is_set(schema.get('items')):
        return 'array'
    return 'unknown'


def schema_details(schema: Any) -> str:
    """Summarize the constraint facets of a schema node on one line."""
    if not isinstance(schema, dict):
        return ''
    parts: List[str] = []
    if 'const' in schema:
        parts.append(f"const={encode_literal(schema['const'])}")
    enum = schema.get('enum')
    if isinstance(enum, list) and enum:
        parts.append('enum=' + ', '.join(encode_literal(v) for v in enum))
    if 'default' in schema:
        parts.append(f"default={encode_literal(schema['default'])}")
    if _is_set(schema.get('format')):
        parts.append(f"format={format_scalar(schema['format'])}")
    if _is_set(schema.get('pattern')):
        parts.append(f"pattern={format_scalar(schema['pattern'])}")
    if 'minimum' in schema:
        parts.append(f"min={format_scalar(schema['minimum'])}")
    if 'minLength' in schema:
        parts.append(f"minLength={format_scalar(schema['minLength'])}")
    if _is_set(schema.get('uniqueItems')):
        parts.append('uniqueItems=true')
    if schema.get('additionalProperties') is False:
        parts.append('additionalProperties=false')
    return DETAILS_SEPARATOR.join(parts)


def _description(schema: Any, fallback: str = '') -> str:
    if isinstance(schema, dict) and isinstance(schema.get('description'), str):
        return schema['description']
    return fallback


def _required_names(schema: Dict[str, Any]) -> Set[str]:
    required = schema.get('required')
    return set(required) if isinstance(required, list) else set()


def flatten_schema(
    schema: Any,
    root: Any,
    path: str,
    required: bool = False,
    depth: int = 0,
    seen: Optional[Set[str]] = None,
    rows: Optional[List[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """Flatten a schema node into field rows, depth first.

    Properties are visited in lexicographic order. Arrays of objects get an
    extra `path[]` row followed by the item properties. Each child gets its
    own copy of `seen`, so a cycle on one branch never cuts another short.
    """
    if rows is None:
        rows = []
    if seen is None:
        seen = set()

    s = deref(schema, root, seen)
    schema_type = infer_type(s)
    has_items = schema_type == 'array' and _is_set(s.get('items'))

    label = schema_type
    if has_items:
        label = f"array<{infer_type(deref(s['items'], root, set()))}>"

    rows.append({
        'field': path,
        'type': label,
        'required': required,
        'description': _description(s),
        'details': schema_details(s),
        'depth': depth,
    })

    if schema_type == 'object' and isinstance(s.get('properties'), dict):
        required_names = _required_names(s)
        properties = s['properties']
        for name in sorted(properties):
            flatten_schema(
                properties[name], root, f"{path}.{name}",
                name in required_names, depth + 1, set(seen), rows,
            )
    elif has_items:
        item_seen = set(seen)
        item = deref(s['items'], root, item_seen)
        if infer_type(item) == 'object' and isinstance(item.get('properties'), dict):
            item_path = f"{path}[]"
            rows.append({
                'field': item_path,
                'type': 'object',
                'required': False,
                'description': _description(item, ARRAY_ITEM_DESCRIPTION),
                'details': schema_details(item),
                'depth': depth + 1,
            })
            required_names = _required_names(item)
            properties = item['properties']
            for name in sorted(properties):
                flatten_schema(
                    properties[name], root, f"{item_path}.{name}",
                    name in required_names, depth + 2, set(item_seen), rows,
                )

    return rows


def flatten_properties(schema: Any, root: Any = None) -> List[Dict[str, Any]]:
    """Flatten every top-level property of a schema document at depth 0."""
    rows: List[Dict[str, Any]] = []
    if not isinstance(schema, dict) or not isinstance(schema.get('properties'), dict):
        return rows
    if root is None:
        root = schema

    required_names = _required_names(schema)
    properties = schema['properties']
    for name in sorted(properties):
        flatten_schema(properties[name], root, name, name in required_names, 0, set(), rows)
    return rows
