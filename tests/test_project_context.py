"""Tests for project context resolution and env layering."""
import textwrap

from devdock.core.project import load_env_layers, parse_env_file, resolve_project

from conftest import write_manifest


def test_parse_env_file(tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text(textwrap.dedent("""\
        # comment
        APP_PORT=3000

        export DB_NAME="shop"
        GREETING='hello world'
        URL=postgres://dev:dev@db:5432/app?sslmode=disable
        not a pair
        """))

    values = parse_env_file(env_file)

    assert values == {
        "APP_PORT": "3000",
        "DB_NAME": "shop",
        "GREETING": "hello world",
        "URL": "postgres://dev:dev@db:5432/app?sslmode=disable",
    }


def test_later_layers_override_earlier(tmp_path):
    (tmp_path / "a.env").write_text("A=1\nB=1\n")
    (tmp_path / "b.env").write_text("B=2\nC=2\n")

    merged = load_env_layers([tmp_path / "a.env", tmp_path / "missing.env", tmp_path / "b.env"])

    assert merged == {"A": "1", "B": "2", "C": "2"}


def test_resolve_project_layers_user_and_project_env(tmp_path, config):
    config.config_home.mkdir(parents=True)
    config.user_env_file.write_text("EDITOR=vim\nAPP_PORT=1\n")
    root = write_manifest(tmp_path / "shop", template="web", version="2").parent
    (root / ".env").write_text("APP_PORT=2\n")
    (root / ".env.local").write_text("APP_PORT=3\n")

    project = resolve_project(root, config)

    assert project.root == root.resolve()
    assert project.manifest == root.resolve() / "compose.yml"
    assert project.env == {"EDITOR": "vim", "APP_PORT": "3"}
    assert project.name == "shop"
    assert project.cache_key.startswith("project-shop-")


def test_resolve_project_without_manifest(tmp_path, config):
    project = resolve_project(tmp_path, config)

    assert project.has_manifest is False
    assert project.env == {}
