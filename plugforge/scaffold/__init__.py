"""Template materialization and the project generation flows.

Quick usage::

    from plugforge.scaffold import PluginDetails, create_project

    details = PluginDetails.from_name("my-awesome-plugin", author="Jane")
    result = create_project(details, Path.cwd(), "base", install=False)
"""

from plugforge.scaffold.errors import InstallError, PreconditionError, ScaffoldError
from plugforge.scaffold.materializer import (
    PathPolicy,
    copy_tree,
    ensure_working_dirs,
    rename_entry_files,
    rename_marked,
    substitute,
)
from plugforge.scaffold.pipeline import ScaffoldResult, create_project, materialize, setup_in_place
from plugforge.scaffold.placeholders import PluginDetails

__all__ = [
    "InstallError",
    "PathPolicy",
    "PluginDetails",
    "PreconditionError",
    "ScaffoldError",
    "ScaffoldResult",
    "copy_tree",
    "create_project",
    "ensure_working_dirs",
    "materialize",
    "rename_entry_files",
    "rename_marked",
    "setup_in_place",
    "substitute",
]
