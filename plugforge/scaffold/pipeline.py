"""The two scaffolding flows built on the materializer.

``create_project`` generates a plugin into a new directory; ``setup_in_place``
overlays a template onto an already checked-out skeleton project that still
carries its ``stubs/`` directory, then removes the generator leftovers.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable

from loguru import logger

from plugforge.config.schema import Config, ScaffoldConfig
from plugforge.scaffold.errors import PreconditionError
from plugforge.scaffold.installer import run_install
from plugforge.scaffold.materializer import (
    CLI_ENTRY,
    PLUGIN_ENTRY,
    PathPolicy,
    copy_tree,
    ensure_working_dirs,
    rename_entry_files,
    rename_marked,
    substitute,
)
from plugforge.scaffold.placeholders import PluginDetails
from plugforge.scaffold.templates import resolve_template

STUBS_DIR = "stubs"


@dataclass
class ScaffoldResult:
    """What a flow did to the destination tree."""

    destination: Path
    template: str
    copied: list[Path] = field(default_factory=list)
    renamed: list[Path] = field(default_factory=list)
    rewritten: list[Path] = field(default_factory=list)
    keep_files: list[Path] = field(default_factory=list)
    removed: list[Path] = field(default_factory=list)
    installed: bool = False


def materialize(
    source: Path,
    destination: Path,
    details: PluginDetails,
    settings: ScaffoldConfig | None = None,
    policy: PathPolicy | None = None,
) -> ScaffoldResult:
    """Copy, rename, substitute and create working dirs, in that order."""
    settings = settings or ScaffoldConfig()
    policy = policy or PathPolicy(excluded_dirs=list(settings.excluded_dirs))
    source = Path(source)
    destination = Path(destination)

    result = ScaffoldResult(destination=destination, template=source.name)

    logger.info(f"Copying template '{source.name}' to {destination}")
    result.copied = copy_tree(source, destination)

    result.renamed = rename_entry_files(destination, details.slug)
    result.renamed.extend(new for _, new in rename_marked(destination, settings.marker_suffix, policy))

    logger.info("Replacing placeholders")
    result.rewritten = substitute(destination, details.placeholders(), policy)

    result.keep_files = ensure_working_dirs(destination, settings.working_dirs, settings.keep_file)
    return result


def check_entry_names(
    source: Path,
    details: PluginDetails,
    settings: ScaffoldConfig,
    existing: Path | None = None,
) -> None:
    """Reject a slug whose entry files would land on a path the tree already uses.

    The reserved names are the top-level entries of the template (with and
    without the marker suffix), the roots of the working directories and the
    top-level directories of an existing project.
    """
    reserved: set[str] = set()
    for entry in Path(source).iterdir():
        if entry.name in (CLI_ENTRY, PLUGIN_ENTRY):
            continue
        reserved.add(entry.name)
        if settings.marker_suffix and entry.name.endswith(settings.marker_suffix):
            reserved.add(entry.name[: -len(settings.marker_suffix)])
    reserved.update(Path(rel).parts[0] for rel in settings.working_dirs if Path(rel).parts)
    if existing is not None:
        reserved.update(entry.name for entry in Path(existing).iterdir() if entry.is_dir())

    for name in (details.slug, f"{details.slug}.php"):
        if name in reserved:
            raise PreconditionError(
                f"Plugin slug '{details.slug}' clashes with '{name}' in the generated tree. "
                "Choose another plugin name."
            )


def _is_empty_dir(path: Path) -> bool:
    return path.is_dir() and not path.is_symlink() and not any(path.iterdir())


def _remove(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


def create_project(
    details: PluginDetails,
    parent_dir: Path,
    template: str = "base",
    *,
    force: bool = False,
    config: Config | None = None,
    install: bool = True,
    on_output: Callable[[str], None] | None = None,
) -> ScaffoldResult:
    """Generate a new plugin at ``parent_dir / details.slug``.

    Raises PreconditionError, without touching the filesystem, for an unknown
    template, a slug that clashes with a template entry or an existing
    non-empty destination when force is not set.
    With force the destination is removed and regenerated.
    """
    config = config or Config()
    source = resolve_template(template, config.scaffold.templates_path)
    check_entry_names(source, details, config.scaffold)
    destination = Path(parent_dir).expanduser() / details.slug

    if destination.exists() or destination.is_symlink():
        if not _is_empty_dir(destination):
            if not force:
                raise PreconditionError(
                    f"Directory already exists: {destination}. Use --force to overwrite."
                )
            logger.info(f"Removing existing {destination}")
            _remove(destination)

    destination.mkdir(parents=True, exist_ok=True)
    result = materialize(source, destination, details, config.scaffold)

    if install and config.install.enabled:
        run_install(destination, config.install.new_command, config.install.new_timeout, on_output)
        result.installed = True
    return result


def remove_generator_files(project_dir: Path, files: list[str]) -> list[Path]:
    """Delete generator-only files left in a skeleton checkout."""
    removed: list[Path] = []
    for rel in files:
        path = Path(project_dir) / rel
        if path.is_file():
            path.unlink()
            removed.append(Path(rel))
    return removed


def remove_previous_binary(project_dir: Path, previous_binary: str | None, slug: str) -> Path | None:
    """Delete the skeleton's CLI binary unless it is the one just generated."""
    if not previous_binary or previous_binary == slug:
        return None
    path = Path(project_dir) / previous_binary
    if not path.is_file():
        return None
    path.unlink()
    return Path(previous_binary)


def setup_in_place(
    details: PluginDetails,
    project_dir: Path,
    template: str = "base",
    *,
    previous_binary: str | None = None,
    config: Config | None = None,
    install: bool = True,
    on_output: Callable[[str], None] | None = None,
) -> ScaffoldResult:
    """Overlay ``stubs/<template>`` onto project_dir and clean up afterwards.

    Requires ``project_dir/stubs`` to exist; its absence means the project was
    already initialized. previous_binary defaults to the configured skeleton
    binary name.
    """
    config = config or Config()
    settings = config.scaffold
    project = Path(project_dir).expanduser()
    stubs_root = project / STUBS_DIR
    if not stubs_root.is_dir():
        raise PreconditionError("Stubs directory not found. This project might already be initialized.")

    source = resolve_template(template, stubs_root)
    check_entry_names(source, details, settings, existing=project)
    policy = PathPolicy(excluded_dirs=list(settings.excluded_dirs), excluded_paths=[STUBS_DIR])
    result = materialize(source, project, details, settings, policy)

    logger.info("Removing generator files")
    shutil.rmtree(stubs_root)
    result.removed.append(Path(STUBS_DIR))
    result.removed.extend(remove_generator_files(project, settings.generator_files))

    binary = remove_previous_binary(
        project,
        previous_binary if previous_binary is not None else settings.previous_binary,
        details.slug,
    )
    if binary is not None:
        result.removed.append(binary)

    if install and config.install.enabled:
        run_install(project, config.install.setup_command, config.install.setup_timeout, on_output)
        result.installed = True
    return result
