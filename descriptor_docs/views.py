"""HTML rendering for every docs view.

Each `render_*` function returns a list of HTML card strings; `render_route`
dispatches a parsed route and joins the cards. All descriptor text goes
through `escape`.
"""
from __future__ import annotations

import json
from html import escape as _escape
from typing import Any, Dict, Iterable, List, Optional

from .context import DocsContext
from .object_kinds import ObjectKind
from .routing import Route, encode_key
from .schema_fields import flatten_properties

PLACEHOLDER = '—'


def escape(value: Any) -> str:
    return _escape('' if value is None else str(value), quote=True)


def matches(query: str, *fields: Any) -> bool:
    """Case-insensitive substring match of `query` against any field."""
    if not query:
        return True
    q = query.lower()
    return any(q in str(f or '').lower() for f in fields)


def pretty_json(value: Any) -> str:
    return json.dumps(value, indent=2, ensure_ascii=False)


def sev_class(severity: Any) -> str:
    if severity in ('critical', 'high', 'medium', 'low'):
        return f"sev-{severity}"
    return 'sev-info'


# --- small builders ---

def code(value: Any) -> str:
    return f"<code>{escape(value)}</code>"


def muted(inner_html: str, tag: str = 'div') -> str:
    return f'<{tag} class="muted">{inner_html}</{tag}>'


def chip(label: str, href: str) -> str:
    return f'<a class="chip" href="{escape(href)}">{escape(label)}</a>'


def link(href: str, inner_html: str) -> str:
    return f'<a href="{escape(href)}">{inner_html}</a>'


def card(*children: str) -> str:
    return '<div class="card">' + ''.join(c for c in children if c) + '</div>'


def json_block(value: Any) -> str:
    return f'<pre class="json">{escape(pretty_json(value))}</pre>'


def table(headers: Iterable[str], rows: Iterable[Iterable[str]]) -> str:
    head = ''.join(f"<th>{escape(h)}</th>" for h in headers)
    body = ''.join('<tr>' + ''.join(f"<td>{cell}</td>" for cell in row) + '</tr>' for row in rows)
    return f'<table class="table"><thead><tr>{head}</tr></thead><tbody>{body}</tbody></table>'


def bullet_list(items: List[str]) -> str:
    if not items:
        return '<ul><li class="muted">(none)</li></ul>'
    return '<ul>' + ''.join(f"<li>{i}</li>" for i in items) + '</ul>'


def not_found(title: str, key: str) -> List[str]:
    return [card(f"<h1>{escape(title)}</h1>", muted(escape(key)))]


def _obj(entry: Any, name: str) -> Dict[str, Any]:
    """Unwrap `entry.object.<name>` of a compiled descriptor entry."""
    if not isinstance(entry, dict):
        return {}
    return (entry.get('object') or {}).get(name) or {}


# --- field table ---

def render_field_table(rows: List[Dict[str, Any]], query: str = '') -> str:
    filtered = [r for r in rows if matches(query, r['field'], r['type'], r['description'], r['details'])]
    cells = []
    for r in filtered:
        indent = '&nbsp;' * (r['depth'] * 4)
        cells.append([
            indent + code(r['field']),
            code(r['type']),
            '<span class="chip">required</span>' if r['required'] else muted('optional', 'span'),
            muted(escape(r['description']) if r['description'] else PLACEHOLDER, 'span'),
            muted(escape(r['details']) if r['details'] else PLACEHOLDER, 'span'),
        ])
    return table(['Field', 'Type', 'Required', 'Description', 'Details'], cells)


# --- views ---

def render_overview(ctx: DocsContext) -> List[str]:
    d = ctx.get_descriptor()
    v = d.get('version') or {}
    schema_version = v.get('schema_version')
    return [
        card(
            '<h1>Overview</h1>',
            muted(escape(f"Spec version {v.get('spec_version') or '?'} "
                         f"(schema_version {'?' if schema_version is None else schema_version})")),
            '<div class="chips">' + ''.join([
                chip(f"rulesets: {len(d.get('rulesets') or [])}", '#rulesets'),
                chip(f"datasets: {len(d.get('dataset_contracts') or [])}", '#datasets'),
                chip(f"connectors: {len(d.get('connectors') or [])}", '#connectors'),
                chip(f"profiles: {len(d.get('profiles') or [])}", '#profiles'),
                chip('requirements', '#requirements'),
                chip('artifacts', '#artifacts'),
            ]) + '</div>',
        ),
        card(
            '<h2>Descriptor</h2>',
            muted('This site renders from the compiled descriptor (no evaluation logic).'),
            json_block(d),
        ),
    ]


def find_ruleset(ctx: DocsContext, key: str) -> Optional[Dict[str, Any]]:
    for entry in ctx.get_descriptor().get('rulesets') or []:
        if _obj(entry, 'ruleset').get('key') == key:
            return entry
    return None


def render_rulesets(ctx: DocsContext) -> List[str]:
    rows = []
    for entry in ctx.get_descriptor().get('rulesets') or []:
        rs = _obj(entry, 'ruleset')
        scope = rs.get('scope') or {}
        source = rs.get('source') or {}
        if not matches(ctx.query, rs.get('key'), rs.get('name'), scope.get('kind'),
                       scope.get('connector_kind'), source.get('name'), source.get('version')):
            continue
        connector = scope.get('connector_kind') or ''
        rows.append([
            link(f"#ruleset/{encode_key(rs.get('key', ''))}",
                 f"<div>{code(rs.get('key'))}</div>" + muted(escape(rs.get('name')))),
            code(scope.get('kind') or '') + (muted(code(connector)) if connector else ''),
            escape(len(rs.get('rules') or [])),
            code(entry.get('hash')),
        ])
    return [
        card('<h1>Rulesets</h1>', muted('Compiled rulesets (sorted and hashed deterministically).')),
        card(table(['Ruleset', 'Scope', 'Rules', 'Hash'], rows)),
    ]


def render_ruleset_detail(ctx: DocsContext, key: str) -> List[str]:
    entry = find_ruleset(ctx, key)
    if entry is None:
        return not_found('Ruleset not found', key)
    rs = _obj(entry, 'ruleset')
    scope = rs.get('scope') or {}
    source = rs.get('source') or {}
    all_rules = rs.get('rules') or []

    rows = []
    for r in all_rules:
        monitoring = (r.get('monitoring') or {}).get('status') or ''
        check_type = (r.get('check') or {}).get('type') or ''
        if not matches(ctx.query, r.get('key'), r.get('summary'), r.get('name'),
                       r.get('severity'), monitoring, check_type):
            continue
        rows.append([
            code(r.get('key')),
            f'<span class="{sev_class(r.get("severity"))}">{code(r.get("severity"))}</span>',
            code(monitoring),
            code(check_type),
            muted(escape(r.get('summary') or ''), 'span'),
        ])

    chips = [chip(f"scope: {scope.get('kind') or '?'}", '#rulesets')]
    if scope.get('connector_kind'):
        chips.append(chip(f"connector: {scope['connector_kind']}", '#connectors'))
    chips.append(chip(f"rules: {len(all_rules)}", '#rulesets'))

    return [
        card(
            f"<h1>Ruleset: {code(rs.get('key'))}</h1>",
            muted(escape(rs.get('name'))),
            '<div class="chips">' + ''.join(chips) + '</div>',
            muted('source: ' + ' '.join(code(source.get(k) or '') for k in ('name', 'version', 'date'))),
            muted(f"source_path: {code(entry.get('source_path'))}"),
            muted(f"hash: {code(entry.get('hash'))}"),
        ),
        card(table(['Rule', 'Severity', 'Monitoring', 'Check', 'Summary'], rows)),
        card('<h2>JSON</h2>', json_block(entry.get('object'))),
    ]


def find_dataset(ctx: DocsContext, key_with_version: str) -> Optional[Dict[str, Any]]:
    """Look up `key@version`; a blank version (`key@`) means version 0."""
    key, sep, version_text = key_with_version.partition('@')
    if not sep:
        return None
    version_text = version_text.split('@', 1)[0].strip()
    try:
        version = float(version_text) if version_text else 0.0
    except ValueError:
        return None
    for entry in ctx.get_descriptor().get('dataset_contracts') or []:
        ds = _obj(entry, 'dataset')
        dv = ds.get('version')
        if ds.get('key') == key and isinstance(dv, (int, float)) and not isinstance(dv, bool) and dv == version:
            return entry
    return None


def render_datasets(ctx: DocsContext) -> List[str]:
    rows = []
    for entry in ctx.get_descriptor().get('dataset_contracts') or []:
        ds = _obj(entry, 'dataset')
        if not matches(ctx.query, ds.get('key'), ds.get('description'), str(ds.get('version'))):
            continue
        key = f"{ds.get('key')}@{ds.get('version')}"
        rows.append([
            link(f"#dataset/{encode_key(key)}", code(key)),
            muted(escape(ds.get('description') or ''), 'span'),
            code(entry.get('hash')),
        ])
    return [
        card('<h1>Dataset Contracts</h1>', muted('Contracts define dataset keys, versions, and row schemas.')),
        card(table(['Dataset', 'Description', 'Hash'], rows)),
    ]


def render_dataset_detail(ctx: DocsContext, key_with_version: str) -> List[str]:
    entry = find_dataset(ctx, key_with_version)
    if entry is None:
        return not_found('Dataset not found', key_with_version)
    ds = _obj(entry, 'dataset')
    row_schema = ds.get('schema')
    rows = flatten_properties(row_schema)
    key = f"{ds.get('key')}@{ds.get('version')}"

    cards = [
        card(
            f"<h1>Dataset: {code(key)}</h1>",
            muted(escape(ds['description'])) if ds.get('description') else '',
            muted(f"primary_key: {code(ds['primary_key'])}") if ds.get('primary_key') else '',
            muted(f"recommended_display: {code(ds['recommended_display'])}") if ds.get('recommended_display') else '',
            muted(f"source_path: {code(entry.get('source_path'))}"),
            muted(f"hash: {code(entry.get('hash'))}"),
        ),
    ]
    if rows:
        cards.append(card(
            '<h2>Fields</h2>',
            muted('Field list is derived from the dataset row JSON Schema.'),
            render_field_table(rows, ctx.query),
        ))
    cards.append(card('<h2>Row Schema</h2>', json_block(row_schema)))
    cards.append(card('<h2>JSON</h2>', json_block(entry.get('object'))))
    return cards


def render_connectors(ctx: DocsContext) -> List[str]:
    rows = []
    for entry in ctx.get_descriptor().get('connectors') or []:
        co = _obj(entry, 'connector')
        if not matches(ctx.query, co.get('kind'), co.get('name')):
            continue
        rows.append([
            link(f"#connector/{encode_key(co.get('kind', ''))}",
                 f"<div>{code(co.get('kind'))}</div>" + muted(escape(co.get('name')))),
            escape(len(co.get('provides') or [])),
            code(entry.get('hash')),
        ])
    return [
        card('<h1>Connectors</h1>', muted('Connector manifests declare datasets that a connector can provide.')),
        card(table(['Connector', 'Provides', 'Hash'], rows)),
    ]


def render_connector_detail(ctx: DocsContext, kind: str) -> List[str]:
    entry = next((e for e in ctx.get_descriptor().get('connectors') or []
                  if _obj(e, 'connector').get('kind') == kind), None)
    if entry is None:
        return not_found('Connector not found', kind)
    co = _obj(entry, 'connector')
    provides = [code(f"{p.get('dataset')}@{p.get('version')}") for p in co.get('provides') or []]
    return [
        card(
            f"<h1>Connector: {code(co.get('kind'))}</h1>",
            muted(escape(co.get('name'))),
            muted(f"source_path: {code(entry.get('source_path'))}"),
            muted(f"hash: {code(entry.get('hash'))}"),
        ),
        card('<h2>Provides</h2>', f"<div>{bullet_list(provides)}</div>"),
        card('<h2>JSON</h2>', json_block(entry.get('object'))),
    ]


def render_profiles(ctx: DocsContext) -> List[str]:
    rows = []
    for entry in ctx.get_descriptor().get('profiles') or []:
        p = _obj(entry, 'profile')
        if not matches(ctx.query, p.get('key'), p.get('name'), p.get('description')):
            continue
        rows.append([
            link(f"#profile/{encode_key(p.get('key', ''))}",
                 f"<div>{code(p.get('key'))}</div>" + muted(escape(p.get('name')))),
            escape(len(p.get('rulesets') or [])),
            code(entry.get('hash')),
        ])
    return [
        card('<h1>Profiles</h1>', muted('Profiles bundle rulesets for baselines (e.g., CIS).')),
        card(table(['Profile', 'Rulesets', 'Hash'], rows)),
    ]


def render_profile_detail(ctx: DocsContext, key: str) -> List[str]:
    entry = next((e for e in ctx.get_descriptor().get('profiles') or []
                  if _obj(e, 'profile').get('key') == key), None)
    if entry is None:
        return not_found('Profile not found', key)
    p = _obj(entry, 'profile')
    rulesets = []
    for r in p.get('rulesets') or []:
        item = link(f"#ruleset/{encode_key(r.get('key', ''))}", code(r.get('key')))
        if r.get('version'):
            item += ' ' + muted(code(r['version']), 'span')
        rulesets.append(item)
    return [
        card(
            f"<h1>Profile: {code(p.get('key'))}</h1>",
            muted(escape(p.get('name'))),
            muted(escape(p['description'])) if p.get('description') else '',
            muted(f"source_path: {code(entry.get('source_path'))}"),
            muted(f"hash: {code(entry.get('hash'))}"),
        ),
        card('<h2>Rulesets</h2>', f"<div>{bullet_list(rulesets)}</div>"),
        card('<h2>JSON</h2>', json_block(entry.get('object'))),
    ]


def render_dictionary(ctx: DocsContext) -> List[str]:
    dictionary_obj = (ctx.get_descriptor().get('dictionary') or {}).get('object') or {}
    enums = (dictionary_obj.get('dictionary') or {}).get('enums') or {}
    rows = [[code(name), ', '.join(code(v) for v in enums[name] or [])] for name in sorted(enums)]
    return [
        card('<h1>Dictionary</h1>', muted('Central enums shared by specs and generated code.')),
        card(table(['Enum', 'Values'], rows)),
        card('<h2>JSON</h2>', json_block(dictionary_obj)),
    ]


def render_artifacts(ctx: DocsContext) -> List[str]:
    index = ctx.get_descriptor().get('index') or {}
    artifacts = (index.get('artifacts') or {}).get('artifacts') or []
    rows = [
        [code(a.get('kind')), code(a.get('key')), code(a.get('source_path')), code(a.get('hash'))]
        for a in artifacts
        if matches(ctx.query, a.get('kind'), a.get('key'), a.get('source_path'), a.get('hash'))
    ]
    return [
        card('<h1>Artifacts Index</h1>', muted('All compiled objects and their stable hashes.')),
        card(table(['Kind', 'Key', 'Source', 'Hash'], rows)),
    ]


def render_requirements(ctx: DocsContext) -> List[str]:
    index = ctx.get_descriptor().get('index') or {}
    requirements = (index.get('requirements') or {}).get('rulesets') or []
    none = muted('(none)', 'span')
    rows = []
    for rr in requirements:
        scope = rr.get('scope') or {}
        if not matches(ctx.query, rr.get('ruleset_key'), scope.get('kind'), scope.get('connector_kind')):
            continue
        check_types = ', '.join(code(x) for x in rr.get('check_types') or [])
        datasets = ', '.join(code(f"{x.get('dataset')}@{x.get('version')}") for x in rr.get('datasets') or [])
        connector = scope.get('connector_kind')
        rows.append([
            link(f"#ruleset/{encode_key(rr.get('ruleset_key', ''))}", code(rr.get('ruleset_key'))),
            code(scope.get('kind') or '') + (muted(code(connector)) if connector else ''),
            check_types or none,
            datasets or none,
        ])
    return [
        card('<h1>Requirements Index</h1>',
             muted('Computed requirements per ruleset (datasets + check types + params).')),
        card(table(['Ruleset', 'Scope', 'Check Types', 'Datasets'], rows)),
    ]


def render_schema_doc(ctx: DocsContext, kind_value: str) -> List[str]:
    kind = ObjectKind.from_value(kind_value)
    schema = ctx.get_schema(kind) if kind is not None else None
    if schema is None:
        return [card('<h1>Schema not loaded</h1>', muted(escape(f"Missing metaschema for {kind_value}")))]

    rows = flatten_properties(schema)
    example = kind.example(ctx.get_descriptor())

    cards = [
        card(
            f"<h1>Schema: {code(kind.value)}</h1>",
            muted(escape(schema.get('title') or kind.value)),
            muted(escape(schema['description'])) if schema.get('description') else '',
            muted(f"source: {code('docs/metaschema/' + kind.schema_file)}"),
        ),
        card(
            '<h2>Fields</h2>',
            muted('Field list is derived from the JSON Schema descriptions.'),
            render_field_table(rows, ctx.query),
        ),
    ]
    if example:
        cards.append(card('<h2>Example</h2>', json_block(example)))
    cards.append(card('<h2>JSON Schema</h2>', json_block(schema)))
    return cards


def render_route(ctx: DocsContext, route: Route) -> str:
    view = route.view
    if view == 'overview':
        cards = render_overview(ctx)
    elif view == 'rulesets':
        cards = render_rulesets(ctx)
    elif view == 'ruleset':
        cards = render_ruleset_detail(ctx, route.key)
    elif view == 'datasets':
        cards = render_datasets(ctx)
    elif view == 'dataset':
        cards = render_dataset_detail(ctx, route.key)
    elif view == 'connectors':
        cards = render_connectors(ctx)
    elif view == 'connector':
        cards = render_connector_detail(ctx, route.key)
    elif view == 'profiles':
        cards = render_profiles(ctx)
    elif view == 'profile':
        cards = render_profile_detail(ctx, route.key)
    elif view == 'dictionary':
        cards = render_dictionary(ctx)
    elif view == 'artifacts':
        cards = render_artifacts(ctx)
    elif view == 'requirements':
        cards = render_requirements(ctx)
    elif view == 'schema':
        cards = render_schema_doc(ctx, route.key)
    else:
        cards = [card('<h1>Not found</h1>', muted(escape(f"Unknown view: {view}")))]
    return '<div class="docs">' + ''.join(cards) + '</div>'
