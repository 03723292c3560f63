"""
dfakit CLI entry point.

Commands:
- dfakit run: Run an input through a machine
- dfakit validate: Validate a machine definition file
- dfakit info: Show machine information
- dfakit machines: List built-in machines
- dfakit serve: Start the HTTP server
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from rich.text import Text

from dfakit import __version__
from dfakit.cli_ui import (
    config_panel,
    console,
    dim,
    error,
    machine_heading,
    machine_summary,
    make_table,
    missing_transitions,
    run_result,
    states_table,
    transitions_table,
)


def setup_logging(debug: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


@click.group()
@click.version_option(version=__version__, prog_name="dfakit")
def main() -> None:
    """dfakit - Declarative deterministic finite-state machines.

    Build, validate and run DFAs described in YAML or JSON.
    """
    pass


@main.command()
@click.argument("input_string", metavar="INPUT")
@click.option(
    "--machine",
    "-m",
    type=str,
    default=None,
    help="Built-in machine name (default: from dfakit.yaml, else mod-three)",
)
@click.option(
    "--file",
    "-f",
    "machine_file",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Machine definition file (overrides --machine)",
)
@click.option(
    "--trace",
    is_flag=True,
    help="Show the states visited",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging",
)
def run(
    input_string: str,
    machine: Optional[str],
    machine_file: Optional[Path],
    trace: bool,
    debug: bool,
) -> None:
    """Run INPUT through a machine and print its output.

    Examples:

        dfakit run 110

        dfakit run xyxxy -f greetings.yaml --trace

    Without --machine or --file, the machine configured in dfakit.yaml
    (or DFAKIT_MACHINE__NAME / DFAKIT_MACHINE__PATH) is used.
    """
    setup_logging(debug)

    from dfakit.config.settings import DfakitSettings
    from dfakit.machine.errors import MachineError
    from dfakit.machine.parser import MachineParser, MachineRegistry

    try:
        if machine_file:
            fsm = MachineParser.load_machine(machine_file)
        elif machine:
            fsm = MachineRegistry.with_builtins().build(machine)
        else:
            fsm = DfakitSettings().load_definition().build()
    except KeyError as e:
        error(str(e).strip("'\""), hint="List built-in machines with: dfakit machines")
        raise SystemExit(1)
    except (MachineError, ValueError, yaml.YAMLError) as e:
        error(f"Invalid machine: {e}")
        raise SystemExit(1)

    result = fsm.run(input_string)
    run_result(result, trace=trace)
    if not result.ok:
        raise SystemExit(1)


@main.command()
@click.argument(
    "config_path",
    type=click.Path(exists=True, path_type=Path),
)
def validate(config_path: Path) -> None:
    """Validate a machine definition file.

    Checks that the definition is well formed and that every state and
    token it references exists.

    Example:
        dfakit validate mod_three.yaml
    """
    from dfakit.machine.errors import MachineError
    from dfakit.machine.parser import MachineParser

    try:
        definition = MachineParser.parse_file(config_path)
        fsm = definition.build()
        machine_summary(definition, fsm)

    except FileNotFoundError:
        error(f"File not found: {config_path}")
        raise SystemExit(1)
    except MachineError as e:
        error(f"Inconsistent machine ({e.kind.value}): {e}")
        raise SystemExit(1)
    except (ValueError, yaml.YAMLError) as e:
        error(f"Validation error: {e}")
        raise SystemExit(1)


@main.command()
@click.argument(
    "config_path",
    type=click.Path(exists=True, path_type=Path),
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Show detailed information",
)
def info(config_path: Path, verbose: bool) -> None:
    """Show detailed machine information.

    Displays states, outputs and transitions.

    Example:
        dfakit info mod_three.yaml --verbose
    """
    from dfakit.machine.errors import MachineError
    from dfakit.machine.parser import MachineParser

    try:
        definition = MachineParser.parse_file(config_path)
        fsm = definition.build()
    except (MachineError, ValueError, yaml.YAMLError) as e:
        error(str(e))
        raise SystemExit(1)

    machine_heading(definition, fsm)
    descriptions = (
        {name: state.description for name, state in definition.states.items()} if verbose else None
    )
    states_table(fsm, descriptions)
    transitions_table(fsm)
    if verbose:
        missing_transitions(fsm.missing_transitions())
    console.print()


@main.command()
def machines() -> None:
    """List built-in machines."""
    from dfakit.machines import BUILTIN_MACHINES

    rows = []
    for name, factory in sorted(BUILTIN_MACHINES.items()):
        definition = factory()
        rows.append([name, definition.version, definition.description or ""])
    make_table("Built-in Machines", ["Name", "Version", "Description"], rows)


@main.command()
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Server port (default: from config, 8000)",
)
@click.option(
    "--host",
    "-h",
    type=str,
    default=None,
    help="Server host (default: from config, 127.0.0.1)",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to dfakit.yaml config file",
)
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Enable debug logging",
)
def serve(port: Optional[int], host: Optional[str], config: Optional[Path], debug: bool) -> None:
    """Start the dfakit HTTP server.

    Serves the mod-three page at / and the JSON run API at /machines.

    Configure via dfakit.yaml or environment variables:
        dfakit serve -c dfakit.yaml
        dfakit serve --port 8000
    """
    setup_logging(debug)

    from dfakit.config.settings import DfakitSettings
    from dfakit.machine.errors import MachineError
    from dfakit.server import start_server

    try:
        settings = DfakitSettings(
            _config_path=str(config) if config else None,
            debug=debug,
        )
        if host:
            settings.server.host = host
        if port:
            settings.server.port = port
        settings.load_definition().build()
    except MachineError as e:
        error(f"Inconsistent machine ({e.kind.value}): {e}", hint="Check your dfakit.yaml")
        raise SystemExit(1)
    except (ValueError, yaml.YAMLError) as e:
        error(str(e), hint="Check your dfakit.yaml")
        raise SystemExit(1)

    config_panel(
        "dfakit Server",
        {
            "Machine": settings.machine.path or settings.machine.name,
            "Host": f"{settings.server.host}:{settings.server.port}",
            "Max Input": str(settings.server.max_input_length),
        },
    )
    console.print(
        Text.assemble(
            ("  Listening on ", ""),
            (f"http://{settings.server.host}:{settings.server.port}/", "bold cyan underline"),
        )
    )
    console.print()

    try:
        start_server(settings)
    except KeyboardInterrupt:
        dim("\nShutting down...")


@main.command()
def version() -> None:
    """Show version information."""
    console.print(
        Text.assemble(
            ("dfakit", "bold"),
            (f" v{__version__}", "dim"),
        )
    )


if __name__ == "__main__":
    main()
