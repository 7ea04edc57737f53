from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DocsSettings:
    """Where the docs artifacts live and how the app is titled.

    `source` is either a local directory or an http(s) base URL; the
    descriptor and the metaschema directory are looked up relative to it.
    """

    source: str = 'docs'
    descriptor_file: str = 'descriptor.v1.json'
    metaschema_dir: str = 'metaschema'
    title: str = 'OpenSSPM Docs'
