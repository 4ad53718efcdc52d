"""Placeholder values derived from the user's plugin details."""

from __future__ import annotations

import re
import unicodedata

from pydantic import BaseModel, field_validator


DEFAULT_AUTHOR = "Your Name"
DEFAULT_AUTHOR_EMAIL = "you@example.com"
DEFAULT_AUTHOR_URL = "https://example.com"
DEFAULT_LICENSE = "GPL-2.0-or-later"

_SEPARATORS = re.compile(r"[\s_\-]+")
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def _ascii(value: str) -> str:
    return unicodedata.normalize("NFKD", value).encode("ascii", "ignore").decode("ascii")


def _words(value: str) -> list[str]:
    words: list[str] = []
    for part in _SEPARATORS.split(value.strip()):
        words.extend(w for w in _CAMEL_BOUNDARY.sub(" ", part).split(" ") if w)
    return words


def slugify(value: str) -> str:
    """``My Awesome_Plugin!`` -> ``my-awesome-plugin``."""
    return re.sub(r"[^a-z0-9]+", "-", _ascii(value).lower()).strip("-")


def studly(value: str) -> str:
    """``my-awesome plugin`` -> ``MyAwesomePlugin``."""
    text = "".join(w[:1].upper() + w[1:] for w in _SEPARATORS.split(_ascii(value)) if w)
    return re.sub(r"[^A-Za-z0-9]", "", text)


def headline(value: str) -> str:
    """``my-awesome-plugin`` -> ``My Awesome Plugin``."""
    return " ".join(w[:1].upper() + w[1:] for w in _words(value))


def snake(value: str) -> str:
    """``My Awesome Plugin`` -> ``my_awesome_plugin``."""
    return "_".join(w.lower() for w in _words(value))


class PluginDetails(BaseModel):
    """Values substituted into a template."""

    name: str
    slug: str
    namespace: str
    plugin_name: str
    function_prefix: str
    constant_prefix: str
    description: str
    author_name: str = DEFAULT_AUTHOR
    author_email: str = DEFAULT_AUTHOR_EMAIL
    author_url: str = DEFAULT_AUTHOR_URL
    vendor: str
    license: str = DEFAULT_LICENSE

    @field_validator("slug")
    @classmethod
    def _check_slug(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value or value in {".", ".."}:
            raise ValueError(f"Invalid plugin slug: {value!r}")
        return value

    @classmethod
    def from_name(
        cls,
        name: str,
        *,
        description: str | None = None,
        author: str | None = None,
        author_email: str | None = None,
        author_url: str | None = None,
        namespace: str | None = None,
        vendor: str | None = None,
        license: str | None = None,
    ) -> "PluginDetails":
        """Derive every placeholder value from the plugin name and options.

        Empty options fall back to the defaults used by the ``new`` command.
        """
        name = (name or "").strip()
        slug = slugify(name)
        if not slug:
            raise ValueError("Plugin name must contain at least one letter or digit")

        plugin_name = headline(name)
        author_name = author or DEFAULT_AUTHOR
        constant_prefix = re.sub(r"[^A-Za-z0-9]+", "_", _ascii(snake(name))).strip("_").upper()

        return cls(
            name=name,
            slug=slug,
            namespace=namespace or studly(name),
            plugin_name=plugin_name,
            function_prefix=slug.replace("-", "_"),
            constant_prefix=constant_prefix,
            description=description or f"A new plugin named {plugin_name}.",
            author_name=author_name,
            author_email=author_email or DEFAULT_AUTHOR_EMAIL,
            author_url=author_url if author_url is not None else DEFAULT_AUTHOR_URL,
            vendor=vendor or slugify(author_name) or "your-name",
            license=license or DEFAULT_LICENSE,
        )

    def placeholders(self) -> dict[str, str]:
        return {
            "{{name}}": self.name,
            "{{slug}}": self.slug,
            "{{functionPrefix}}": self.function_prefix,
            "{{namespace}}": self.namespace,
            "{{pluginName}}": self.plugin_name,
            "{{constantPrefix}}": self.constant_prefix,
            "{{description}}": self.description,
            "{{authorName}}": self.author_name,
            "{{authorEmail}}": self.author_email,
            "{{authorUrl}}": self.author_url,
            "{{vendor}}": self.vendor,
            "{{license}}": self.license,
        }
