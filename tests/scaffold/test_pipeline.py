"""Tests for the new-project and in-place setup flows."""

import os
import stat
import sys
from pathlib import Path

import pytest

from plugforge.config.schema import Config, InstallConfig, ScaffoldConfig
from plugforge.scaffold.errors import InstallError, PreconditionError
from plugforge.scaffold.pipeline import create_project, materialize, setup_in_place
from plugforge.scaffold.placeholders import PluginDetails
from plugforge.scaffold.templates import available_templates

WORKING_DIRS = [
    "storage/logs",
    "storage/framework/views",
    "storage/framework/cache",
    "storage/framework/sessions",
]


def _demo_details() -> PluginDetails:
    details = PluginDetails.from_name("Demo Plugin", author="Jane")
    assert details.slug == "demo-plugin"
    return details


def _config(template_root: Path | None = None, **install) -> Config:
    scaffold = ScaffoldConfig(templates_dir=str(template_root)) if template_root else ScaffoldConfig()
    return Config(scaffold=scaffold, install=InstallConfig(**install))


def _tree(root: Path) -> dict[str, bytes]:
    return {str(p.relative_to(root)): p.read_bytes() for p in sorted(root.rglob("*")) if p.is_file()}


def test_materialize_end_to_end(tmp_path: Path, template_root: Path):
    dest = tmp_path / "out"
    mapping_details = _demo_details()

    result = materialize(template_root / "demo", dest, mapping_details)

    binary = dest / "demo-plugin"
    assert binary.read_text(encoding="utf-8") == "#!/usr/bin/env x\n// demo-plugin"
    assert binary.stat().st_mode & stat.S_IXUSR
    assert (dest / "demo-plugin.php").read_text(encoding="utf-8") == "<?php // Demo Plugin"
    assert (dest / "readme").read_text(encoding="utf-8") == "Demo Plugin by Jane"
    for rel in WORKING_DIRS:
        marker = dest / rel / ".gitkeep"
        assert marker.is_file()
        assert marker.stat().st_size == 0
    assert not list(dest.rglob("*.stub"))
    assert len(result.copied) == 3
    assert Path("readme") in result.renamed


def test_materialize_leaves_template_untouched(tmp_path: Path, template_root: Path):
    before = _tree(template_root)
    materialize(template_root / "demo", tmp_path / "out", _demo_details())
    assert _tree(template_root) == before


def test_create_project_generates_into_slug_directory(tmp_path: Path, template_root: Path):
    result = create_project(
        _demo_details(), tmp_path, "demo", config=_config(template_root), install=False
    )

    assert result.destination == tmp_path / "demo-plugin"
    assert (tmp_path / "demo-plugin" / "demo-plugin.php").exists()
    assert result.installed is False


def test_create_project_refuses_existing_directory_without_force(tmp_path: Path, template_root: Path):
    existing = tmp_path / "demo-plugin"
    existing.mkdir()
    (existing / "notes.txt").write_text("do not touch", encoding="utf-8")
    before = _tree(tmp_path)

    with pytest.raises(PreconditionError, match="--force"):
        create_project(_demo_details(), tmp_path, "demo", config=_config(template_root), install=False)

    assert _tree(tmp_path) == before


def test_create_project_force_recreates_directory(tmp_path: Path, template_root: Path):
    existing = tmp_path / "demo-plugin"
    existing.mkdir()
    (existing / "notes.txt").write_text("stale", encoding="utf-8")

    create_project(
        _demo_details(), tmp_path, "demo", force=True, config=_config(template_root), install=False
    )

    assert not (existing / "notes.txt").exists()
    assert (existing / "readme").read_text(encoding="utf-8") == "Demo Plugin by Jane"


def test_create_project_accepts_empty_existing_directory(tmp_path: Path, template_root: Path):
    (tmp_path / "demo-plugin").mkdir()
    create_project(_demo_details(), tmp_path, "demo", config=_config(template_root), install=False)
    assert (tmp_path / "demo-plugin" / "readme").exists()


def test_create_project_unknown_template_makes_no_changes(tmp_path: Path, template_root: Path):
    parent = tmp_path / "parent"
    parent.mkdir()

    with pytest.raises(PreconditionError, match="Available: demo"):
        create_project(_demo_details(), parent, "fancy", config=_config(template_root), install=False)

    assert list(parent.iterdir()) == []


def test_create_project_runs_install_command(tmp_path: Path, template_root: Path):
    marker = "open('installed.txt', 'w').write('ok')"
    config = _config(template_root, new_command=[sys.executable, "-c", marker], new_timeout=30)
    lines = []

    result = create_project(_demo_details(), tmp_path, "demo", config=config, on_output=lines.append)

    assert result.installed is True
    assert (tmp_path / "demo-plugin" / "installed.txt").read_text() == "ok"


def test_create_project_install_failure_keeps_files(tmp_path: Path, template_root: Path):
    config = _config(template_root, new_command=[sys.executable, "-c", "import sys; sys.exit(3)"])

    with pytest.raises(InstallError):
        create_project(_demo_details(), tmp_path, "demo", config=config)

    assert (tmp_path / "demo-plugin" / "demo-plugin.php").exists()


def test_create_project_install_disabled_in_config(tmp_path: Path, template_root: Path):
    config = _config(template_root, enabled=False, new_command=["definitely-missing-binary"])
    result = create_project(_demo_details(), tmp_path, "demo", config=config)
    assert result.installed is False


@pytest.mark.parametrize("template", ["base", "minimal"])
def test_packaged_templates_materialize_cleanly(tmp_path: Path, template: str):
    details = PluginDetails.from_name("my-awesome-plugin", author="Jane Doe")

    result = create_project(details, tmp_path, template, install=False)

    root = result.destination
    assert (root / "my-awesome-plugin").exists()
    assert (root / "my-awesome-plugin.php").exists()
    assert (root / "composer.json").exists()
    assert not list(root.rglob("*.stub"))
    for path in root.rglob("*"):
        if path.is_file():
            assert "{{" not in path.read_text(encoding="utf-8"), path
    composer = (root / "composer.json").read_text(encoding="utf-8")
    assert '"name": "jane-doe/my-awesome-plugin"' in composer
    assert '"MyAwesomePlugin\\\\": "app/"' in composer


def test_packaged_templates_are_listed():
    assert {"base", "minimal"} <= set(available_templates())


def _skeleton(tmp_path: Path) -> Path:
    project = tmp_path / "skeleton"
    stub = project / "stubs" / "base"
    (stub / "app" / "Providers").mkdir(parents=True)
    (stub / "cli.stub").write_text("#!/usr/bin/env php\n// {{slug}}", encoding="utf-8")
    (stub / "plugin.php.stub").write_text("<?php // {{pluginName}}", encoding="utf-8")
    (stub / "composer.json.stub").write_text('{"name": "{{vendor}}/{{slug}}"}', encoding="utf-8")
    (stub / "app" / "Providers" / "AppServiceProvider.php.stub").write_text(
        "namespace {{namespace}}\\Providers;", encoding="utf-8"
    )
    (project / "stubs" / "minimal").mkdir()
    (project / "stubs" / "minimal" / "cli.stub").write_text("minimal", encoding="utf-8")

    (project / "composer.json").write_text('{"name": "andexer/wp-laracode"}', encoding="utf-8")
    (project / "wp-laracode").write_text("#!/usr/bin/env php", encoding="utf-8")
    commands = project / "app" / "Commands"
    commands.mkdir(parents=True)
    for name in ("NewCommand.php", "InspireCommand.php", "SetupCommand.php"):
        (commands / name).write_text("<?php namespace App\\Commands;", encoding="utf-8")
    (commands / "KeepCommand.php").write_text("<?php // {{slug}}", encoding="utf-8")
    vendor = project / "vendor" / "acme"
    vendor.mkdir(parents=True)
    (vendor / "lib.php.stub").write_text("{{slug}}", encoding="utf-8")
    return project


def test_setup_in_place_overlays_and_cleans_up(tmp_path: Path):
    project = _skeleton(tmp_path)
    details = _demo_details()

    result = setup_in_place(details, project, "base", install=False)

    assert (project / "demo-plugin").read_text(encoding="utf-8") == "#!/usr/bin/env php\n// demo-plugin"
    assert os.access(project / "demo-plugin", os.X_OK)
    assert (project / "demo-plugin.php").read_text(encoding="utf-8") == "<?php // Demo Plugin"
    assert (project / "composer.json").read_text(encoding="utf-8") == '{"name": "jane/demo-plugin"}'
    assert (project / "app" / "Providers" / "AppServiceProvider.php").read_text(encoding="utf-8") == (
        "namespace DemoPlugin\\Providers;"
    )
    assert (project / "app" / "Commands" / "KeepCommand.php").read_text(encoding="utf-8") == "<?php // demo-plugin"

    assert not (project / "stubs").exists()
    assert not (project / "wp-laracode").exists()
    for name in ("NewCommand.php", "InspireCommand.php", "SetupCommand.php"):
        assert not (project / "app" / "Commands" / name).exists()
    assert Path("stubs") in result.removed
    assert Path("wp-laracode") in result.removed

    assert (project / "vendor" / "acme" / "lib.php.stub").read_text(encoding="utf-8") == "{{slug}}"
    assert (project / "storage" / "logs" / ".gitkeep").exists()


def test_setup_in_place_keeps_binary_matching_slug(tmp_path: Path):
    project = _skeleton(tmp_path)
    details = PluginDetails.from_name("wp-laracode")

    result = setup_in_place(details, project, "base", install=False)

    assert (project / "wp-laracode").read_text(encoding="utf-8") == "#!/usr/bin/env php\n// wp-laracode"
    assert Path("wp-laracode") not in result.removed


def test_setup_in_place_previous_binary_is_explicit(tmp_path: Path):
    project = _skeleton(tmp_path)
    (project / "old-tool").write_text("old", encoding="utf-8")

    setup_in_place(_demo_details(), project, "base", previous_binary="old-tool", install=False)

    assert not (project / "old-tool").exists()
    assert (project / "wp-laracode").exists()


def test_setup_in_place_requires_stubs_directory(tmp_path: Path):
    project = tmp_path / "initialized"
    project.mkdir()
    (project / "composer.json").write_text("{}", encoding="utf-8")

    with pytest.raises(PreconditionError, match="already be initialized"):
        setup_in_place(_demo_details(), project, "base", install=False)

    assert _tree(project) == {"composer.json": b"{}"}


def test_setup_in_place_unknown_template(tmp_path: Path):
    project = _skeleton(tmp_path)
    before = _tree(project)

    with pytest.raises(PreconditionError):
        setup_in_place(_demo_details(), project, "fancy", install=False)

    assert _tree(project) == before


@pytest.mark.parametrize("name", ["app", "config", "storage"])
def test_create_project_rejects_slug_clashing_with_template_entries(tmp_path: Path, name: str):
    parent = tmp_path / "parent"
    parent.mkdir()

    with pytest.raises(PreconditionError, match="clashes"):
        create_project(PluginDetails.from_name(name), parent, "base", install=False)

    assert list(parent.iterdir()) == []


def test_create_project_rejects_slug_clashing_with_template_file(tmp_path: Path, template_root: Path):
    with pytest.raises(PreconditionError, match="clashes with 'readme'"):
        create_project(
            PluginDetails.from_name("readme"), tmp_path, "demo", config=_config(template_root), install=False
        )

    assert not (tmp_path / "readme").exists()


@pytest.mark.parametrize("name", ["app", "storage", "vendor"])
def test_setup_in_place_rejects_slug_clashing_with_project_paths(tmp_path: Path, name: str):
    project = _skeleton(tmp_path)
    before = _tree(project)

    with pytest.raises(PreconditionError, match="clashes"):
        setup_in_place(PluginDetails.from_name(name), project, "base", install=False)

    assert _tree(project) == before
    assert (project / "stubs").is_dir()


def test_setup_in_place_leaves_git_metadata_alone(tmp_path: Path):
    project = _skeleton(tmp_path)
    packed = project / ".git" / "objects" / "pack" / "pack-1.idx"
    packed.parent.mkdir(parents=True)
    packed.write_text("{{slug}} {{namespace}}", encoding="utf-8")

    result = setup_in_place(_demo_details(), project, "base", install=False)

    assert packed.read_text(encoding="utf-8") == "{{slug}} {{namespace}}"
    assert not any(part == ".git" for rel in result.rewritten for part in rel.parts)
