"""Template materialization: copy, rename and placeholder substitution.

Each step is a single linear pass over a directory tree and is meant to be
called in a fixed order by the pipeline::

    copy_tree(template, dest)
    rename_entry_files(dest, slug)
    rename_marked(dest, ".stub", policy)
    substitute(dest, placeholders, policy)
    ensure_working_dirs(dest, WORKING_DIRS)

Nothing is rolled back: a failing step raises the underlying ``OSError`` and
leaves the destination as far as it got.
"""

from __future__ import annotations

import errno
import os
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, Mapping

from loguru import logger


MARKER_SUFFIX = ".stub"
CLI_ENTRY = "cli.stub"
PLUGIN_ENTRY = "plugin.php.stub"
KEEP_FILE = ".gitkeep"

WORKING_DIRS = [
    "storage/logs",
    "storage/framework/views",
    "storage/framework/cache",
    "storage/framework/sessions",
]


@dataclass
class PathPolicy:
    """Traversal rule for walks over a destination tree.

    A relative path is allowed unless one of its components is an excluded
    directory name, or it lies at or below one of the excluded relative
    paths. Excluded directories are pruned, never descended into.
    """

    excluded_dirs: list[str] = field(default_factory=lambda: [".git", "node_modules", "vendor"])
    excluded_paths: list[str] = field(default_factory=list)

    def allows(self, relative: Path) -> bool:
        relative = Path(relative)
        if any(part in self.excluded_dirs for part in relative.parts):
            return False
        for excluded in self.excluded_paths:
            prefix = Path(excluded)
            if relative == prefix or prefix in relative.parents:
                return False
        return True


def iter_files(
    root: Path,
    policy: PathPolicy | None = None,
    follow_links: bool = False,
) -> Iterator[Path]:
    """Yield every file under root as a relative path, in sorted order.

    Symlinked directories are only descended into when follow_links is set.
    """
    root = Path(root)
    for dirpath, dirnames, filenames in os.walk(root, followlinks=follow_links):
        rel_dir = Path(dirpath).relative_to(root)
        if policy is not None:
            dirnames[:] = [d for d in dirnames if policy.allows(rel_dir / d)]
        dirnames.sort()
        for name in sorted(filenames):
            rel = rel_dir / name
            if policy is None or policy.allows(rel):
                yield rel


def is_binary(content: bytes) -> bool:
    return b"\0" in content


def copy_tree(source_dir: Path, dest_dir: Path) -> list[Path]:
    """Copy every file of source_dir to the same relative path under dest_dir.

    Missing directories are created and existing files are overwritten.
    Symlinked files and directories in the source are copied as their
    targets. Returns the copied relative paths.
    """
    source = Path(source_dir)
    dest = Path(dest_dir)
    if not source.is_dir():
        raise FileNotFoundError(errno.ENOENT, "Template directory not found", str(source))

    copied: list[Path] = []
    for rel in iter_files(source, follow_links=True):
        target = dest / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source / rel, target)
        copied.append(rel)

    logger.debug(f"Copied {len(copied)} file(s) from {source} to {dest}")
    return copied


def rename_entry_files(
    dest_dir: Path,
    slug: str,
    cli_entry: str = CLI_ENTRY,
    plugin_entry: str = PLUGIN_ENTRY,
) -> list[Path]:
    """Rename the CLI entry to ``{slug}`` (executable) and the plugin entry to ``{slug}.php``.

    Must run before :func:`rename_marked`. Entries missing from the template
    are skipped.
    """
    dest = Path(dest_dir)
    renamed: list[Path] = []

    cli_path = dest / cli_entry
    if cli_path.is_file():
        target = dest / slug
        os.replace(cli_path, target)
        target.chmod(0o755)
        renamed.append(Path(slug))
    else:
        logger.debug(f"No CLI entry {cli_entry} in {dest}")

    plugin_path = dest / plugin_entry
    if plugin_path.is_file():
        target = dest / f"{slug}.php"
        os.replace(plugin_path, target)
        renamed.append(Path(f"{slug}.php"))
    else:
        logger.debug(f"No plugin entry {plugin_entry} in {dest}")

    return renamed


def rename_marked(
    dest_dir: Path,
    marker_suffix: str = MARKER_SUFFIX,
    policy: PathPolicy | None = None,
) -> list[tuple[Path, Path]]:
    """Strip marker_suffix from every allowed file name under dest_dir.

    The suffix is removed exactly once and an existing file at the new name
    is replaced. Returns (old, new) relative path pairs.
    """
    if not marker_suffix:
        raise ValueError("marker_suffix must not be empty")

    dest = Path(dest_dir)
    # Collect first: renaming while os.walk is iterating a directory is unsafe.
    candidates = [
        rel
        for rel in iter_files(dest, policy)
        if rel.name.endswith(marker_suffix) and len(rel.name) > len(marker_suffix)
    ]

    renamed: list[tuple[Path, Path]] = []
    for rel in candidates:
        new_rel = rel.with_name(rel.name[: -len(marker_suffix)])
        os.replace(dest / rel, dest / new_rel)
        renamed.append((rel, new_rel))

    logger.debug(f"Renamed {len(renamed)} {marker_suffix} file(s) under {dest}")
    return renamed


def _compile_tokens(tokens: list[bytes]) -> re.Pattern[bytes]:
    # Longest first so the alternation never stops at a shorter overlapping token.
    ordered = sorted(tokens, key=len, reverse=True)
    return re.compile(b"|".join(re.escape(token) for token in ordered))


def substitute(
    dest_dir: Path,
    placeholders: Mapping[str, str],
    policy: PathPolicy | None = None,
) -> list[Path]:
    """Replace every placeholder token in every allowed text file under dest_dir.

    All tokens are replaced in one pass, so an inserted value is never scanned
    again. Files containing a null byte are left untouched, as are files with
    no token occurrence. Returns the rewritten relative paths.
    """
    if any(not token for token in placeholders):
        raise ValueError("Placeholder tokens must not be empty")
    if not placeholders:
        return []

    dest = Path(dest_dir)
    replacements = {
        token.encode("utf-8"): value.encode("utf-8") for token, value in placeholders.items()
    }
    pattern = _compile_tokens(list(replacements))

    rewritten: list[Path] = []
    for rel in list(iter_files(dest, policy)):
        path = dest / rel
        if path.is_symlink():
            continue
        content = path.read_bytes()
        if is_binary(content):
            logger.debug(f"Skipping binary file {rel}")
            continue

        new_content = pattern.sub(lambda m: replacements[m.group(0)], content)
        if new_content != content:
            path.write_bytes(new_content)
            rewritten.append(rel)

    logger.debug(f"Substituted placeholders in {len(rewritten)} file(s) under {dest}")
    return rewritten


def ensure_working_dirs(
    dest_dir: Path,
    directories: list[str] | None = None,
    keep_file: str = KEEP_FILE,
) -> list[Path]:
    """Create each working directory with a zero-byte keep file.

    Existing directories and keep files are left as they are. Returns the
    relative paths of keep files created by this call.
    """
    dest = Path(dest_dir)
    created: list[Path] = []
    for rel in directories if directories is not None else WORKING_DIRS:
        directory = dest / rel
        directory.mkdir(parents=True, exist_ok=True)
        marker = directory / keep_file
        if not marker.exists():
            marker.touch()
            created.append(Path(rel) / keep_file)
    return created
