from __future__ import annotations

from typing import List, NamedTuple
from urllib.parse import quote, unquote

from .object_kinds import ObjectKind

DEFAULT_ROUTE = '#overview'


class Route(NamedTuple):
    view: str
    rest: List[str]

    @property
    def key(self) -> str:
        """Everything after the view name, percent-decoded."""
        return unquote('/'.join(self.rest))


def parse_route(fragment: str) -> Route:
    fragment = (fragment or '').strip() or DEFAULT_ROUTE
    parts = [p for p in fragment.lstrip('#').split('/') if p]
    return Route(parts[0] if parts else 'overview', parts[1:])


def encode_key(key: str) -> str:
    return quote(str(key), safe='')


def active_nav_href(route: Route) -> str:
    """The navigation entry to highlight for `route`, or '' for none."""
    if route.view == 'schema':
        return f"#schema/{encode_key(route.rest[0] if route.rest else '')}"
    return _NAV_BY_VIEW.get(route.view, '')


_NAV_BY_VIEW = {
    'overview': '#overview',
    'ruleset': '#rulesets',
    'rulesets': '#rulesets',
    'dataset': '#datasets',
    'datasets': '#datasets',
    'connector': '#connectors',
    'connectors': '#connectors',
    'profile': '#profiles',
    'profiles': '#profiles',
    'dictionary': '#dictionary',
    'requirements': '#requirements',
    'artifacts': '#artifacts',
}

NAV_LINKS = [
    ('Overview', '#overview'),
    ('Rulesets', '#rulesets'),
    ('Datasets', '#datasets'),
    ('Connectors', '#connectors'),
    ('Profiles', '#profiles'),
    ('Dictionary', '#dictionary'),
    ('Requirements', '#requirements'),
    ('Artifacts', '#artifacts'),
] + [(f"Schema: {kind.label}", f"#schema/{encode_key(kind.value)}") for kind in ObjectKind]
