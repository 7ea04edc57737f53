from __future__ import annotations

import logging
from typing import Optional

import gradio as gr

from .context import DocsContext, DocsNotLoadedError
from .io_utils import DocsLoadError, load_docs_bundle
from .routing import DEFAULT_ROUTE, active_nav_href, parse_route
from .settings import DocsSettings
from .views import render_route

logger = logging.getLogger(__name__)

NO_DATA_HTML = '<div class="muted">No data loaded.</div>'


def render_content(ctx: Optional[DocsContext], route_text: str):
    """Render the view for `route_text` plus the matching nav selection."""
    if ctx is None or not ctx.loaded:
        return NO_DATA_HTML, gr.update()
    route = parse_route(route_text)
    try:
        html = render_route(ctx, route)
    except DocsNotLoadedError:
        return NO_DATA_HTML, gr.update()
    return html, gr.update(value=active_nav_href(route) or None)


def load_docs_handler(settings: DocsSettings, route_text: str = DEFAULT_ROUTE, query: str = ''):
    """Load the docs once per session and render the route the page was opened at.

    Returns (state, status, version, html, nav, route); the route is echoed back
    so the route box shows the deep link the browser started on.
    """
    route_text = route_text or DEFAULT_ROUTE
    ctx = DocsContext(query=query or '')
    try:
        descriptor, schemas = load_docs_bundle(settings)
    except DocsLoadError as e:
        logger.error("Failed to load docs data from %s: %s", settings.source, e)
        return None, f"Failed to load docs data: {e}", "", NO_DATA_HTML, gr.update(), route_text

    ctx.populate(descriptor, schemas)
    html, nav_update = render_content(ctx, route_text)
    return ctx, "Loaded.", f"v{ctx.spec_version}", html, nav_update, route_text


def navigate_handler(ctx: Optional[DocsContext], route_text: str):
    return render_content(ctx, route_text)


def search_handler(ctx: Optional[DocsContext], query: str, route_text: str):
    if ctx is None:
        return None, NO_DATA_HTML
    ctx.query = query or ''
    html, _ = render_content(ctx, route_text)
    return ctx, html


def nav_select_handler(href: Optional[str]):
    return href or DEFAULT_ROUTE
