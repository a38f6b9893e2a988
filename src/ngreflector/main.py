import asyncio
import json
import os
import sys
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.table import Table

from ngreflector.build import BuildContext
from ngreflector.config import ResolverConfig, load_settings
from ngreflector.exceptions import ReflectorError
from ngreflector.logging_config import enable_verbose, logger
from ngreflector.reflector import ReflectableReader
from ngreflector.schemas import ReflectableOutput, ResolvedLibrary

app = typer.Typer()
console = Console()
error_console = Console(stderr=True)

_human_mode = False


@app.callback()
def global_options(
    human: bool = typer.Option(
        False,
        "--human",
        "-H",
        help="Enable human mode: tables instead of JSON (also via NGREFLECTOR_HUMAN_MODE env var)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
):
    """
    Resolve which declarations need reflective registration and which
    generated files a library links to.
    """
    global _human_mode
    _human_mode = human or os.getenv("NGREFLECTOR_HUMAN_MODE", "").lower() in ("1", "true", "yes")
    if verbose:
        enable_verbose()


def _fail(message: str) -> None:
    error_console.print(f"[red]Error:[/red] {message}")
    raise typer.Exit(code=1)


@app.command("resolve")
def resolve(
    library_json: Path = typer.Argument(
        ...,
        help="Resolved library model as JSON.",
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        help="Build root to discover inputs and generated files in. Defaults to the JSON file's directory.",
        file_okay=False,
    ),
    output_extension: Optional[str] = typer.Option(None, "--output-extension", help="Extension of generated files."),
    record_components: bool = typer.Option(True, "--record-components/--no-record-components", help="Register factories for @Component classes."),
    record_directives: bool = typer.Option(True, "--record-directives/--no-record-directives", help="Register factories for @Directive classes."),
    record_pipes: bool = typer.Option(True, "--record-pipes/--no-record-pipes", help="Register factories for @Pipe classes."),
    router_annotations: bool = typer.Option(True, "--router-annotations/--no-router-annotations", help="Register legacy @RouteConfig of components."),
    no_linking: bool = typer.Option(False, "--no-linking", help="Do not link to any other generated file."),
    json_output: bool = typer.Option(False, "--json", help="Output results as JSON (default unless --human)."),
):
    """
    Resolve one library and print its reflectable output.
    """
    try:
        library = ResolvedLibrary.model_validate_json(library_json.read_text())
    except ValidationError as e:
        _fail(f"Invalid library model in {library_json}: {e}")
    except (UnicodeDecodeError, OSError) as e:
        _fail(f"Cannot read {library_json}: {e}")

    overrides = {
        "record_components_as_injectables": record_components,
        "record_directives_as_injectables": record_directives,
        "record_pipes_as_injectables": record_pipes,
        "record_router_annotations_for_components": router_annotations,
    }
    if output_extension is not None:
        overrides["output_extension"] = output_extension

    try:
        settings = load_settings()
        if no_linking:
            config = ResolverConfig.from_settings(settings, **overrides)
        else:
            extension = overrides.get("output_extension", settings["reflector"]["output_extension"])
            context = BuildContext.from_directory(root or library_json.parent, output_extension=extension)
            if library.uri and ":" not in library.uri:
                context = context.for_library(library.uri)
            config = ResolverConfig.from_settings(
                settings,
                has_input=context.has_input,
                is_library=context.is_library,
                **overrides,
            )
        output = asyncio.run(ReflectableReader(config).resolve(library))
    except ReflectorError as e:
        logger.debug(f"Resolution of {library_json} failed: {e}")
        _fail(str(e))

    if _human_mode and not json_output:
        _print_tables(output)
    else:
        typer.echo(json.dumps(output.to_dict(), indent=2))


def _print_tables(output: ReflectableOutput) -> None:
    links = Table(title="Linked generated files")
    links.add_column("URI", style="cyan")
    for uri in output.urls_needing_init_reflector:
        links.add_row(uri)
    console.print(links)

    classes = Table(title="Registered classes")
    classes.add_column("Class", style="cyan")
    classes.add_column("Factory")
    classes.add_column("Component")
    classes.add_column("Annotation")
    for reflectable in output.register_classes:
        factory = reflectable.factory
        classes.add_row(
            reflectable.name,
            ", ".join(d.token for d in factory.positional) if factory else "-",
            "yes" if reflectable.register_component_factory else "no",
            reflectable.register_annotation.source if reflectable.register_annotation else "-",
        )
    console.print(classes)

    functions = Table(title="Registered functions")
    functions.add_column("Function", style="cyan")
    functions.add_column("Dependencies")
    for invocation in output.register_functions:
        functions.add_row(invocation.bound.name, ", ".join(d.token for d in invocation.positional))
    console.print(functions)


@app.command("config")
def show_config():
    """
    Print the effective settings.
    """
    try:
        settings = load_settings()
    except ReflectorError as e:
        _fail(str(e))
    typer.echo(json.dumps(settings, indent=2))


def main():
    try:
        app()
    except KeyboardInterrupt:
        sys.exit(130)


if __name__ == "__main__":
    main()
