"""Rich rendering for the dfakit CLI.

Holds the console, the small message helpers and the machine views
(summary panel, state and transition tables, run results) so cli.py only
deals with loading machines and exit codes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, Iterable, List, Optional, Tuple

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text
from rich.theme import Theme

if TYPE_CHECKING:
    from dfakit.machine.engine import FiniteStateMachine, RunResult
    from dfakit.machine.schema import MachineDefinition

THEME = Theme(
    {
        "error": "bold red",
        "success": "green",
        "warning": "yellow",
        "dim": "dim",
        "state": "cyan",
        "token": "magenta",
        "initial": "green",
        "accepting": "blue",
    }
)

console = Console(theme=THEME, highlight=False)

_MAX_WIDTH = 80
PATH_SEPARATOR = " → "


def _panel_width() -> int:
    return min(console.width, _MAX_WIDTH)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------


def success(msg: str) -> None:
    console.print(f"  [success]✓[/] {escape(msg)}")


def error(msg: str, hint: Optional[str] = None) -> None:
    """Red X + message, optional dim hint. Messages are never parsed as markup."""
    console.print(f"  [error]✗ {escape(msg)}[/]")
    if hint:
        console.print(f"    [dim]{escape(hint)}[/]")


def warning(msg: str) -> None:
    console.print(f"  [warning]![/] {escape(msg)}")


def dim(msg: str) -> None:
    console.print(f"  [dim]{escape(msg)}[/]")


def key_value(key: str, value: str, indent: int = 2) -> None:
    """Print 'key: value' with bold key."""
    console.print(f"{' ' * indent}[bold]{key}:[/] {escape(value)}")


# ---------------------------------------------------------------------------
# Panels and tables
# ---------------------------------------------------------------------------


def config_panel(title: str, items: Dict[str, str]) -> None:
    """Panel showing a key-value summary."""
    body = "\n".join(f"[bold]{k}:[/] {escape(v)}" for k, v in items.items())
    console.print()
    console.print(
        Panel(
            body,
            title=title,
            title_align="left",
            border_style="dim",
            width=_panel_width(),
            padding=(0, 1),
        )
    )


def make_table(title: str, columns: List[str], rows: Iterable[List[str]]) -> None:
    """Build and print a table; cells may carry theme markup."""
    table = Table(
        title=title,
        title_style="bold",
        header_style="bold dim",
        border_style="dim",
        width=_panel_width(),
        padding=(0, 1),
    )
    for col in columns:
        table.add_column(col)
    for row in rows:
        table.add_row(*row)
    console.print()
    console.print(table)


# ---------------------------------------------------------------------------
# Machine views
# ---------------------------------------------------------------------------


def machine_summary(
    definition: "MachineDefinition", fsm: "FiniteStateMachine", title: str = "✓ Valid Machine"
) -> None:
    """Summary panel for a built machine."""
    config_panel(
        title,
        {
            "Name": definition.name,
            "Version": definition.version,
            "Alphabet": " ".join(fsm.alphabet),
            "States": str(len(fsm.states)),
            "Accepting": str(len(fsm.states.accepting())),
            "Initial": fsm.initial_state,
            "Transitions": str(len(fsm.transitions)),
        },
    )


def machine_heading(definition: "MachineDefinition", fsm: "FiniteStateMachine") -> None:
    console.print()
    console.print(Text.assemble((definition.name, "bold"), (f"  v{definition.version}", "dim")))
    if definition.description:
        dim(definition.description)
    key_value("Alphabet", " ".join(fsm.alphabet))


def states_table(
    fsm: "FiniteStateMachine", descriptions: Optional[Dict[str, Optional[str]]] = None
) -> None:
    """
    Table of states with their role and output.

    Args:
        fsm: Machine to describe
        descriptions: State descriptions; adds a Description column when given
    """
    rows = []
    for name, descriptor in fsm.states.items():
        roles = []
        if name == fsm.initial_state:
            roles.append("[initial]initial[/]")
        if descriptor.allow_final:
            roles.append("[accepting]accepting[/]")
        output = escape(repr(descriptor.output)) if descriptor.allow_final else "-"
        row = [f"[state]{escape(name)}[/]", ", ".join(roles) or "-", output]
        if descriptions is not None:
            row.append(escape(descriptions.get(name) or ""))
        rows.append(row)

    columns = ["Name", "Type", "Output"]
    if descriptions is not None:
        columns.append("Description")
    make_table("States", columns, rows)


def transitions_table(fsm: "FiniteStateMachine") -> None:
    """Table of transitions; prints nothing for an empty table."""
    if not len(fsm.transitions):
        return
    make_table(
        "Transitions",
        ["From", "Token", "To"],
        (
            [f"[state]{escape(source)}[/]", f"[token]{escape(token)}[/]", f"→ [state]{escape(target)}[/]"]
            for source, token, target in fsm.transitions.items()
        ),
    )


def missing_transitions(missing: List[Tuple[str, str]]) -> None:
    """Report (state, token) pairs with no transition, or a complete table."""
    if not missing:
        success("Transition table is complete")
        return
    console.print()
    warning(f"{len(missing)} (state, token) pair(s) without a transition:")
    for state, token in missing:
        console.print(f"    {state} on {token!r}", markup=False)


def run_result(result: "RunResult", trace: bool = False) -> None:
    """
    Print the outcome of a run.

    The output goes out bare so it can be piped; a failure prints the error
    kind and message.
    """
    if trace:
        dim(PATH_SEPARATOR.join(result.path))
    if result.ok:
        console.print(str(result.output), markup=False)
    else:
        error(f"{result.kind.value}: {result.error}")
