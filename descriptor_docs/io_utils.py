from __future__ import annotations

import http.client
import json
import logging
import os
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Tuple

from .object_kinds import ObjectKind
from .settings import DocsSettings

logger = logging.getLogger(__name__)

REMOTE_SCHEMES = ('http://', 'https://')


class DocsLoadError(Exception):
    """Raised when one of the docs artifacts cannot be fetched or parsed."""


def is_remote_location(location: str) -> bool:
    return location.startswith(REMOTE_SCHEMES)


def read_json_file(path: str) -> Any:
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def join_location(base: str, *parts: str) -> str:
    if is_remote_location(base):
        return '/'.join([base.rstrip('/')] + [p.strip('/') for p in parts])
    return os.path.join(base, *parts)


def _read_url(location: str) -> bytes:
    req = urllib.request.Request(location, headers={'Accept': 'application/json', 'Cache-Control': 'no-store'})
    try:
        with urllib.request.urlopen(req) as resp:
            return resp.read()
    except urllib.error.HTTPError as e:
        raise DocsLoadError(f"HTTP {e.code}") from e
    except urllib.error.URLError as e:
        raise DocsLoadError(f"{location}: {e.reason}") from e
    except (OSError, http.client.HTTPException) as e:
        # Connection dropped while the body was being read.
        raise DocsLoadError(f"{location}: {e!r}") from e


def fetch_json(location: str) -> Any:
    """Fetch one JSON document from an http(s) URL or a local path."""
    logger.debug("Fetching %s", location)
    try:
        if is_remote_location(location):
            return json.loads(_read_url(location).decode('utf-8'))
        return read_json_file(location)
    except OSError as e:
        raise DocsLoadError(f"{location}: {e.strerror or e}") from e
    except ValueError as e:
        raise DocsLoadError(f"{location}: invalid JSON ({e})") from e


def load_docs_bundle(settings: DocsSettings) -> Tuple[Dict[str, Any], Dict[ObjectKind, Dict[str, Any]]]:
    """Load the descriptor and every metaschema.

    All fetches run concurrently; the first failure aborts the whole load.
    """
    descriptor_location = join_location(settings.source, settings.descriptor_file)
    schema_locations = {
        kind: join_location(settings.source, settings.metaschema_dir, kind.schema_file)
        for kind in ObjectKind
    }

    with ThreadPoolExecutor(max_workers=len(schema_locations) + 1) as executor:
        descriptor_future = executor.submit(fetch_json, descriptor_location)
        schema_futures = {kind: executor.submit(fetch_json, loc) for kind, loc in schema_locations.items()}

        descriptor = descriptor_future.result()
        schemas = {kind: future.result() for kind, future in schema_futures.items()}

    if not isinstance(descriptor, dict):
        raise DocsLoadError(f"{descriptor_location}: descriptor is not a JSON object")

    logger.info("Loaded descriptor from %s and %d metaschemas", descriptor_location, len(schemas))
    return descriptor, schemas
