import copy

import pytest

from descriptor_docs.context import DocsContext, DocsNotLoadedError
from descriptor_docs.object_kinds import ObjectKind
from descriptor_docs.routing import parse_route
from descriptor_docs.views import find_dataset, matches, render_field_table, render_route, sev_class


def _render(ctx, fragment):
    return render_route(ctx, parse_route(fragment))


def test_matches_is_case_insensitive_substring():
    assert matches("", "anything")
    assert matches("OKTA", "cis.okta.v1", None)
    assert not matches("gcp", "cis.okta.v1", None)


def test_sev_class():
    assert sev_class("critical") == "sev-critical"
    assert sev_class("weird") == "sev-info"


def test_field_table_indents_and_placeholders():
    rows = [
        {"field": "a", "type": "object", "required": True, "description": "", "details": "", "depth": 0},
        {"field": "a.b", "type": "string", "required": False, "description": "B <b>", "details": "", "depth": 1},
    ]
    html = render_field_table(rows)
    assert '<span class="chip">required</span>' in html
    assert '<span class="muted">optional</span>' in html
    assert "&nbsp;" * 4 + "<code>a.b</code>" in html
    assert "B &lt;b&gt;" in html
    assert '<span class="muted">—</span>' in html


def test_field_table_filters_rows():
    rows = [
        {"field": "id", "type": "string", "required": True, "description": "", "details": "", "depth": 0},
        {"field": "count", "type": "integer", "required": False, "description": "", "details": "min=0", "depth": 0},
    ]
    html = render_field_table(rows, "min=")
    assert "<code>count</code>" in html
    assert "<code>id</code>" not in html


def test_overview(loaded_ctx):
    html = _render(loaded_ctx, "#overview")
    assert "Spec version 0.3.0 (schema_version 1)" in html
    assert "rulesets: 1" in html
    assert 'href="#artifacts"' in html


def test_rulesets_list_and_filter(loaded_ctx):
    assert 'href="#ruleset/cis.okta.v1"' in _render(loaded_ctx, "#rulesets")
    loaded_ctx.query = "gcp"
    assert "cis.okta.v1" not in _render(loaded_ctx, "#rulesets")


def test_ruleset_detail(loaded_ctx):
    html = _render(loaded_ctx, "#ruleset/cis.okta.v1")
    assert "Ruleset: <code>cis.okta.v1</code>" in html
    assert '<span class="sev-high"><code>high</code></span>' in html
    assert "connector: okta" in html
    assert "A written &lt;policy&gt; exists." in html
    loaded_ctx.query = "manual"
    html = _render(loaded_ctx, "#ruleset/cis.okta.v1")
    assert "okta.policy_doc" in html
    assert "<code>okta.mfa</code>" not in html


@pytest.mark.parametrize(
    "fragment, title, key",
    [
        ("#ruleset/nope", "Ruleset not found", "nope"),
        ("#dataset/okta.users@2", "Dataset not found", "okta.users@2"),
        ("#dataset/okta.users", "Dataset not found", "okta.users"),
        ("#connector/gcp", "Connector not found", "gcp"),
        ("#profile/strict", "Profile not found", "strict"),
    ],
)
def test_missing_keys_render_not_found(loaded_ctx, fragment, title, key):
    html = _render(loaded_ctx, fragment)
    assert f"<h1>{title}</h1>" in html
    assert f'<div class="muted">{key}</div>' in html


def test_blank_dataset_version_means_zero(loaded_ctx):
    draft = copy.deepcopy(loaded_ctx.descriptor["dataset_contracts"][0])
    draft["object"]["dataset"].update(key="okta.groups", version=0)
    loaded_ctx.descriptor["dataset_contracts"].append(draft)
    assert find_dataset(loaded_ctx, "okta.groups@") is draft
    assert find_dataset(loaded_ctx, "okta.groups@0") is draft
    assert find_dataset(loaded_ctx, "okta.groups@1") is None
    assert find_dataset(loaded_ctx, "okta.groups") is None
    assert find_dataset(loaded_ctx, "okta.users@") is None
    assert "Dataset: <code>okta.groups@0</code>" in _render(loaded_ctx, "#dataset/okta.groups@")


def test_dataset_detail_lists_row_schema_fields(loaded_ctx):
    html = _render(loaded_ctx, "#dataset/okta.users%401")
    assert "Dataset: <code>okta.users@1</code>" in html
    assert "primary_key: <code>id</code>" in html
    assert "<code>groups[].name</code>" in html
    assert "<code>array&lt;object&gt;</code>" in html


def test_datasets_list(loaded_ctx):
    html = _render(loaded_ctx, "#datasets")
    assert 'href="#dataset/okta.users%401"' in html


def test_connector_and_profile_details(loaded_ctx):
    assert "<li><code>okta.users@1</code></li>" in _render(loaded_ctx, "#connector/okta")
    html = _render(loaded_ctx, "#profile/baseline")
    assert 'href="#ruleset/cis.okta.v1"' in html
    assert "Minimum controls." in html


def test_connectors_and_profiles_lists(loaded_ctx):
    assert 'href="#connector/okta"' in _render(loaded_ctx, "#connectors")
    assert 'href="#profile/baseline"' in _render(loaded_ctx, "#profiles")


def test_dictionary_sorts_enum_names(loaded_ctx):
    html = _render(loaded_ctx, "#dictionary")
    assert html.index("<code>check_type</code>") < html.index("<code>severity</code>")
    assert "<code>critical</code>, <code>high</code>, <code>low</code>" in html


def test_index_views(loaded_ctx):
    artifacts = _render(loaded_ctx, "#artifacts")
    assert "specs/profiles/baseline.yaml" in artifacts
    requirements = _render(loaded_ctx, "#requirements")
    assert "<code>dataset.field_compare</code>" in requirements
    assert "<code>okta.users@1</code>" in requirements


def test_schema_doc(loaded_ctx):
    html = _render(loaded_ctx, "#schema/opensspm.ruleset")
    assert "Schema: <code>opensspm.ruleset</code>" in html
    assert "docs/metaschema/opensspm.ruleset.schema.json" in html
    assert "<code>ruleset.key</code>" in html
    assert "<h2>Example</h2>" in html
    assert "CIS Okta Benchmark" in html


def test_schema_doc_for_unknown_or_missing_kind(loaded_ctx):
    assert "Schema not loaded" in _render(loaded_ctx, "#schema/opensspm.other")
    del loaded_ctx.schemas[ObjectKind.PROFILE]
    html = _render(loaded_ctx, "#schema/opensspm.profile")
    assert "Missing metaschema for opensspm.profile" in html


def test_unknown_view(loaded_ctx):
    html = _render(loaded_ctx, "#elsewhere")
    assert "Unknown view: elsewhere" in html


def test_rendering_requires_loaded_context():
    with pytest.raises(DocsNotLoadedError):
        _render(DocsContext(), "#overview")
