"""Interactive setup wizard for an already checked-out skeleton project."""

from pathlib import Path
from typing import Any, List, Optional, Tuple

import questionary
from rich.console import Console
from rich.prompt import Prompt

from plugforge import __version__, __logo__
from plugforge.scaffold.errors import PreconditionError
from plugforge.scaffold.pipeline import STUBS_DIR
from plugforge.scaffold.placeholders import PluginDetails, slugify, studly
from plugforge.scaffold.templates import available_templates

console = Console()


class ClackUI:
    """Helper to draw Clack style UI components."""

    @staticmethod
    def header():
        console.print(f"  {__logo__} [bold]plugforge {__version__}[/bold]")
        console.print()

    @staticmethod
    def section_start(title: str):
        console.print(f"┌  [bold cyan]{title}[/bold cyan]")

    @staticmethod
    def section_end():
        console.print("└")

    @staticmethod
    def clack_select(message: str, choices: List[Any], default: Any = None) -> Optional[str]:
        """A questionary select styled with Clack vertical lines."""
        console.print("│")
        result = questionary.select(
            f"◇  {message}",
            choices=choices,
            default=default,
            style=questionary.Style([
                ('qmark', 'fg:cyan bold'),
                ('question', 'bold'),
                ('pointer', 'fg:cyan bold'),
                ('highlighted', 'fg:cyan bold'),
                ('selected', 'fg:green'),
            ])
        ).ask()
        if result is None:
            console.print("│  [yellow]Cancelled[/yellow]")
            return None
        return result


class SetupWizard:
    """Collects plugin details for the in-place setup flow."""

    def __init__(self, project_dir: Path, default_template: str = "base"):
        self.project_dir = Path(project_dir)
        self.default_template = default_template

    def templates(self) -> list[str]:
        stubs_root = self.project_dir / STUBS_DIR
        if not stubs_root.is_dir():
            raise PreconditionError("Stubs directory not found. This project might already be initialized.")
        choices = available_templates(stubs_root)
        if not choices:
            raise PreconditionError(f"No templates found in {stubs_root}")
        return choices

    def _choose_template(self, choices: list[str]) -> Optional[str]:
        if len(choices) == 1:
            return choices[0]
        default = self.default_template if self.default_template in choices else choices[0]
        return ClackUI.clack_select(
            "Which template would you like to use?",
            choices=[questionary.Choice(name, value=name) for name in choices],
            default=default,
        )

    def run(self) -> Optional[Tuple[PluginDetails, str]]:
        """Prompt for every value. Returns None when the user cancels."""
        choices = self.templates()

        ClackUI.header()
        console.print("Welcome! Let's configure your new WordPress plugin.")
        console.print()

        ClackUI.section_start("Plugin")
        plugin_name = Prompt.ask("│  Plugin Name", default="My Awesome Plugin")
        description = Prompt.ask("│  Description", default="A generated WordPress plugin.")
        author_name = Prompt.ask("│  Author Name", default="Me")
        author_email = Prompt.ask("│  Author Email", default="me@example.com")
        author_url = Prompt.ask("│  Author URL", default="")
        vendor = Prompt.ask("│  Vendor (for composer)", default=slugify(author_name) or "vendor")
        license = Prompt.ask("│  License", default="MIT")
        ClackUI.section_end()

        template = self._choose_template(choices)
        if template is None:
            return None

        ClackUI.section_start("Namespace")
        namespace = Prompt.ask("│  Namespace", default=studly(plugin_name) or "Plugin")
        ClackUI.section_end()

        details = PluginDetails.from_name(
            plugin_name,
            description=description,
            author=author_name,
            author_email=author_email,
            author_url=author_url,
            namespace=namespace,
            vendor=vendor,
            license=license,
        )
        return details, template


def run_interactive_setup(project_dir: Path, default_template: str = "base") -> Optional[Tuple[PluginDetails, str]]:
    wizard = SetupWizard(project_dir, default_template)
    return wizard.run()
