"""Tests for compose manifest lookup and parsing."""
import textwrap

import pytest
from pydantic import ValidationError

from devdock.core.manifest import (
    ManifestError,
    TemplateStamp,
    find_manifest,
    read_manifest,
)


def test_find_manifest_accepts_conventional_names(tmp_path):
    for name in ("compose.yml", "compose.yaml", "docker-compose.yml", "docker-compose.yaml"):
        directory = tmp_path / name.replace(".", "_")
        directory.mkdir()
        (directory / name).write_text("services: {}\n")
        assert find_manifest(directory) == directory / name


def test_find_manifest_prefers_compose_yml(tmp_path):
    (tmp_path / "docker-compose.yml").write_text("services: {}\n")
    (tmp_path / "compose.yml").write_text("services: {}\n")

    assert find_manifest(tmp_path).name == "compose.yml"


def test_find_manifest_missing(tmp_path):
    assert find_manifest(tmp_path) is None
    assert find_manifest(tmp_path / "nope") is None


def test_read_manifest_flattens_one_level(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text(textwrap.dedent("""\
        name: shop
        x-devdock:
          template: web
          template-version: 2
          beta: true
        services:
          app:
            image: node:22
        volumes:
          - data
        """))

    values = read_manifest(path)

    assert values["name"] == "shop"
    assert values["x-devdock.template"] == "web"
    assert values["x-devdock.template-version"] == "2"
    assert values["x-devdock.beta"] == "true"
    # Deeper nesting and lists are not part of the flat view
    assert "services.app" not in values
    assert "volumes" not in values


def test_read_manifest_quoted_and_unquoted_values_match(tmp_path):
    quoted = tmp_path / "a.yml"
    quoted.write_text('x-devdock:\n  template: "web"\n  template-version: "2"\n')
    unquoted = tmp_path / "b.yml"
    unquoted.write_text("x-devdock:\n  template: web\n  template-version: 2\n")

    assert read_manifest(quoted) == read_manifest(unquoted)


def test_read_manifest_empty_file(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text("")

    assert read_manifest(path) == {}


def test_read_manifest_rejects_non_mapping(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text("- just\n- a list\n")

    with pytest.raises(ManifestError):
        read_manifest(path)


def test_read_manifest_invalid_yaml(tmp_path):
    path = tmp_path / "compose.yml"
    path.write_text("x-devdock: [unclosed\n")

    with pytest.raises(ManifestError) as exc_info:
        read_manifest(path)
    assert "Cannot read" in str(exc_info.value)


class TestTemplateStamp:
    def test_from_values(self):
        stamp = TemplateStamp.from_values({
            "x-devdock.template": "web",
            "x-devdock.template-version": "3",
            "x-devdock.description": "Node stack",
        })

        assert stamp.template == "web"
        assert stamp.template_version == "3"
        assert stamp.description == "Node stack"

    def test_blank_values_become_none(self):
        stamp = TemplateStamp.from_values({
            "x-devdock.template": "  ",
            "x-devdock.template-version": "",
        })

        assert stamp.template is None
        assert stamp.template_version is None

    def test_rejects_path_like_template(self):
        with pytest.raises(ValidationError):
            TemplateStamp.from_values({"x-devdock.template": "../etc"})
