"""Tests for ``package.json`` generation."""

from __future__ import annotations

import json

import pytest

from devops_init.scaffolder.manifest import DATABASE_ENTRIES, build_manifest, render_manifest
from devops_init.scaffolder.templates import TemplateRenderer

pytestmark = pytest.mark.unit


@pytest.fixture
def template_text() -> str:
    return TemplateRenderer().load("config/package.json")


@pytest.fixture
def template(template_text: str) -> dict:
    return json.loads(template_text)


class TestBuildManifest:
    def test_project_fields(self, template, demo_config):
        manifest = build_manifest(template, demo_config)
        assert manifest["name"] == "demo"
        assert manifest["description"] == "Demo API"
        assert manifest["author"] == "Alice Example <alice@example.com>"
        assert manifest["repository"] == {
            "type": "git",
            "url": "git+https://github.com/alice/demo.git",
        }
        assert manifest["bugs"]["url"] == "https://github.com/alice/demo/issues"
        assert manifest["homepage"] == "https://github.com/alice/demo#readme"

    def test_template_not_mutated(self, template, template_text, demo_config):
        build_manifest(template, demo_config)
        assert template == json.loads(template_text)

    def test_database_entries_kept(self, template, demo_config):
        manifest = build_manifest(template, demo_config)
        for section, keys in DATABASE_ENTRIES.items():
            for key in keys:
                assert key in manifest[section]

    def test_database_entries_removed(self, template, no_database_config):
        manifest = build_manifest(template, no_database_config)
        for section, keys in DATABASE_ENTRIES.items():
            for key in keys:
                assert key not in manifest[section]
        assert "express" in manifest["dependencies"]
        assert "start" in manifest["scripts"]

    def test_only_database_entries_differ(self, template, demo_config, no_database_config):
        with_db = build_manifest(template, demo_config)
        without_db = build_manifest(template, no_database_config)
        for section in ("dependencies", "devDependencies", "scripts"):
            removed = set(with_db[section]) - set(without_db[section])
            assert removed == set(DATABASE_ENTRIES[section])
        untouched = set(with_db) - set(DATABASE_ENTRIES)
        for key in untouched:
            assert with_db[key] == without_db[key]

    def test_missing_sections_tolerated(self, no_database_config):
        manifest = build_manifest({"name": "x"}, no_database_config)
        assert manifest["repository"]["url"] == "git+https://github.com/alice/demo.git"
        assert "dependencies" not in manifest


class TestRenderManifest:
    def test_two_space_indent_and_newline(self, template_text, demo_config):
        text = render_manifest(template_text, demo_config)
        assert text.endswith("}\n")
        assert text.splitlines()[1].startswith('  "name"')

    def test_key_order_preserved(self, template_text, template, demo_config):
        rendered = json.loads(render_manifest(template_text, demo_config))
        assert list(rendered) == list(template)

    def test_non_ascii_kept(self, template_text, demo_config):
        config = demo_config.model_copy(update={"author": "Zoë"})
        assert "Zoë <alice@example.com>" in render_manifest(template_text, config)

    def test_invalid_template(self, demo_config):
        with pytest.raises(json.JSONDecodeError):
            render_manifest("{not json", demo_config)
