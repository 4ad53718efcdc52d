"""CLI commands for plugforge."""

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from plugforge import __version__, __logo__
from plugforge.scaffold.errors import InstallError, PreconditionError

app = typer.Typer(
    name="plugforge",
    help=f"{__logo__} plugforge - Scaffold isolated WordPress plugins on a Laravel stack",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} plugforge v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Show debug logs"),
):
    """plugforge - WordPress plugin scaffolding."""
    from plugforge.config.loader import load_config
    from plugforge.core.logger import configure_logger

    config = load_config()
    if verbose:
        config.logging.level = "DEBUG"
    configure_logger(config)


def _stream_output(line: str) -> None:
    console.print(line.rstrip(), style="dim", markup=False, highlight=False, soft_wrap=True)


def _fail(message: str) -> None:
    console.print(f"[red]{message}[/red]")
    raise typer.Exit(1)


def _report_install_error(exc: InstallError, destination: Path) -> None:
    console.print(f"[red]Dependency installation failed: {exc}[/red]")
    if exc.output:
        console.print(exc.output[-2000:], style="dim", markup=False, highlight=False)
    console.print(f"[yellow]Files were generated at {destination}; run the installer there manually.[/yellow]")
    raise typer.Exit(1)


def _report_os_error(exc: OSError) -> None:
    where = f" at {exc.filename}" if exc.filename else ""
    _fail(f"Filesystem error{where}: {exc.strerror or exc}")


# ============================================================================
# New project
# ============================================================================


@app.command("new")
def new_cmd(
    name: str = typer.Argument(..., help="The name of the plugin (e.g., my-awesome-plugin)"),
    author: str = typer.Option("", "--author", help="The author name"),
    author_email: str = typer.Option("", "--author-email", help="The author email"),
    author_url: str = typer.Option("", "--author-url", help="The author URL"),
    description: str = typer.Option("", "--description", help="The plugin description"),
    namespace: str = typer.Option("", "--namespace", help="The root namespace (e.g., MyPlugin)"),
    license: str = typer.Option("GPL-2.0-or-later", "--license", help="The license (GPL-2.0-or-later, MIT, etc.)"),
    template: str = typer.Option("", "--template", "-t", help="Template to use (see: plugforge templates)"),
    directory: Path = typer.Option(Path("."), "--directory", "-d", help="Parent directory of the new plugin"),
    force: bool = typer.Option(False, "--force", help="Overwrite an existing plugin directory"),
    no_install: bool = typer.Option(False, "--no-install", help="Skip composer install"),
):
    """Create a new isolated WordPress plugin from a template."""
    from plugforge.config.loader import load_config
    from plugforge.scaffold.pipeline import create_project
    from plugforge.scaffold.placeholders import PluginDetails

    config = load_config()
    template = template or config.scaffold.default_template

    try:
        details = PluginDetails.from_name(
            name,
            description=description or None,
            author=author or None,
            author_email=author_email or None,
            author_url=author_url or None,
            namespace=namespace or None,
            license=license or None,
        )
    except ValueError as exc:
        _fail(str(exc))

    console.print(f"{__logo__} Creating a new plugin using '{template}' template...")
    destination = directory.expanduser() / details.slug
    try:
        result = create_project(
            details,
            directory,
            template,
            force=force,
            config=config,
            install=not no_install,
            on_output=_stream_output,
        )
    except PreconditionError as exc:
        _fail(str(exc))
    except InstallError as exc:
        _report_install_error(exc, destination)
    except OSError as exc:
        _report_os_error(exc)

    console.print(f"[green]✓[/green] Copied {len(result.copied)} file(s)")
    console.print(f"[green]✓[/green] Replaced placeholders in {len(result.rewritten)} file(s)")
    if result.installed:
        console.print("[green]✓[/green] Installed composer dependencies")
    console.print(f"\n[green]Plugin '{details.plugin_name}' created successfully![/green]\n")

    steps = [f"cd {details.slug}"]
    if not result.installed:
        steps.append("composer install")
    steps.append(f"./{details.slug} list")
    steps.append("Copy the plugin to wp-content/plugins/ and activate it")

    console.print("[yellow]Next steps:[/yellow]")
    for i, step in enumerate(steps, 1):
        console.print(f"  {i}. {step}")


# ============================================================================
# In-place setup
# ============================================================================


@app.command("setup")
def setup_cmd(
    path: Path = typer.Option(Path("."), "--path", "-p", help="Skeleton project to initialize"),
    previous_binary: str = typer.Option(
        "", "--previous-binary", help="Skeleton CLI binary to remove (default from config)"
    ),
    no_install: bool = typer.Option(False, "--no-install", help="Skip composer update"),
):
    """Interactively initialize a checked-out skeleton project in place."""
    from plugforge.cli.setup_wizard import run_interactive_setup
    from plugforge.config.loader import load_config
    from plugforge.scaffold.pipeline import setup_in_place

    config = load_config()
    project_dir = path.expanduser()

    try:
        answers = run_interactive_setup(project_dir, config.scaffold.default_template)
    except (PreconditionError, ValueError) as exc:
        _fail(str(exc))

    if answers is None:
        console.print("[yellow]Setup cancelled[/yellow]")
        raise typer.Exit(1)

    details, template = answers
    console.print(f"[cyan]Setting up plugin '{details.plugin_name}'...[/cyan]")
    try:
        result = setup_in_place(
            details,
            project_dir,
            template,
            previous_binary=previous_binary or None,
            config=config,
            install=not no_install,
            on_output=_stream_output,
        )
    except PreconditionError as exc:
        _fail(str(exc))
    except InstallError as exc:
        _report_install_error(exc, project_dir)
    except OSError as exc:
        _report_os_error(exc)

    for removed in result.removed:
        console.print(f"[dim]Removed {removed}[/dim]")
    console.print(f"\n[green]Configuration complete! Your plugin '{details.plugin_name}' is ready.[/green]")
    console.print(f"[yellow]Binary: ./{details.slug}[/yellow]")
    console.print(f"[yellow]Entry: {details.slug}.php[/yellow]")


# ============================================================================
# Templates
# ============================================================================


@app.command("templates")
def templates_cmd():
    """List the available templates."""
    from plugforge.config.loader import load_config
    from plugforge.scaffold.templates import (
        PACKAGED_TEMPLATES,
        TEMPLATE_DESCRIPTIONS,
        available_templates,
    )

    config = load_config()
    root = config.scaffold.templates_path or PACKAGED_TEMPLATES
    names = available_templates(root)
    if not names:
        console.print(f"[yellow]No templates found in {root}[/yellow]")
        raise typer.Exit(1)

    table = Table(title="Available Templates")
    table.add_column("Name", style="cyan")
    table.add_column("Description")
    table.add_column("Default")
    for name in names:
        default = "[green]✓[/green]" if name == config.scaffold.default_template else ""
        table.add_row(name, TEMPLATE_DESCRIPTIONS.get(name, "-"), default)

    console.print(table)
    console.print(f"\n[dim]Source: {root}[/dim]")


# ============================================================================
# Config
# ============================================================================


@app.command("init")
def init_cmd():
    """Write the default plugforge configuration file."""
    from plugforge.config.loader import get_config_path, save_config
    from plugforge.config.schema import Config

    config_path = get_config_path()

    if config_path.exists():
        console.print(f"[yellow]Config already exists at {config_path}[/yellow]")
        if not typer.confirm("Overwrite?"):
            raise typer.Exit()

    save_config(Config())
    console.print(f"[green]✓[/green] Created config at {config_path}")
    console.print("[dim]Edit it to point scaffold.templatesDir at your own templates.[/dim]")


if __name__ == "__main__":
    app()
