"""Lookup of the named templates a project can be generated from."""

from __future__ import annotations

from pathlib import Path

from plugforge.scaffold.errors import PreconditionError

PACKAGED_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"

TEMPLATE_DESCRIPTIONS = {
    "base": "Full stack: service providers, commands, config, views and routes",
    "minimal": "Plugin entry, CLI binary and a single service provider",
}


def available_templates(root: Path | None = None) -> list[str]:
    """List template names (sub-directories) under root."""
    base = Path(root) if root is not None else PACKAGED_TEMPLATES
    if not base.is_dir():
        return []
    return sorted(p.name for p in base.iterdir() if p.is_dir() and not p.name.startswith("."))


def resolve_template(name: str, root: Path | None = None) -> Path:
    """Return the directory of template name, or raise PreconditionError."""
    base = Path(root) if root is not None else PACKAGED_TEMPLATES
    choices = available_templates(base)
    if name not in choices:
        available = ", ".join(choices) or "none"
        raise PreconditionError(f"Invalid template '{name}'. Available: {available}")
    return base / name
