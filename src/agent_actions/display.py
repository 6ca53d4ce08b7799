# display.py
# All terminal output for the action pipeline.
#
# This module owns presentation entirely. harness.py never formats strings —
# it calls named functions here. Swap this file to change the entire UI.
#
# Colour language:
#   cyan    — scaffolding / routing events
#   blue    — model calls
#   yellow  — authorization checkpoints
#   green   — success
#   red     — failures and denials

from pathlib import Path
from typing import Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from agent_actions.executor import DENIED_MESSAGE
from agent_actions.models import (
    Action,
    CapabilityPolicy,
    ExecuteCommand,
    ReplaceInFile,
    Response,
    SearchFiles,
    WriteFile,
)

console = Console()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _label(tag: str, color: str) -> Text:
    t = Text()
    t.append(f" {tag} ", style=f"bold white on {color}")
    return t


def _mono(value: str, max_len: int = 120) -> str:
    if len(value) > max_len:
        return value[:max_len] + "…"
    return value


def _flag(enabled: bool) -> str:
    return "[bold green]yes[/bold green]" if enabled else "[bold red]no[/bold red]"


def describe(action: Action) -> str:
    """One-line summary of an action's target, for tables."""
    if isinstance(action, ExecuteCommand):
        where = f"  (in {action.working_dir})" if action.working_dir else ""
        return f"{action.command}{where}"
    if isinstance(action, SearchFiles):
        return f"'{action.pattern}' in {action.directory or '.'}"
    if isinstance(action, ReplaceInFile):
        return f"{action.path}: {action.old!r} → {action.new!r}"
    if isinstance(action, WriteFile):
        return f"{action.path} ({len(action.content)} chars)"
    return str(action.path)


# ---------------------------------------------------------------------------
# Session entry
# ---------------------------------------------------------------------------


def banner(model: str, cwd: Path, policy: CapabilityPolicy) -> None:
    restricted = ", ".join(str(p) for p in policy.restricted_paths) or "none"
    console.print()
    console.print(
        Panel.fit(
            "[bold cyan]Agent Action Executor[/bold cyan]\n"
            "[dim]Parse → Authorize → Execute → Report[/dim]\n\n"
            f"[dim]Model      :[/dim] [white]{escape(model)}[/white]\n"
            f"[dim]Directory  :[/dim] [white]{escape(str(cwd))}[/white]\n"
            f"[dim]Read       :[/dim] {_flag(policy.can_read)}   "
            f"[dim]Write :[/dim] {_flag(policy.can_write)}   "
            f"[dim]Modify FS :[/dim] {_flag(policy.can_modify_filesystem)}   "
            f"[dim]Execute :[/dim] {_flag(policy.can_execute)}\n"
            f"[dim]Restricted :[/dim] [white]{escape(restricted)}[/white]",
            border_style="cyan",
            padding=(1, 4),
        )
    )


def prompt_received(prompt: str) -> None:
    console.print()
    console.print(Rule("[cyan]NEW REQUEST[/cyan]", style="cyan"))
    console.print(
        Panel(
            f"[white]{escape(prompt)}[/white]",
            title=_label("USER PROMPT", "cyan"),
            border_style="cyan",
            padding=(0, 2),
        )
    )


def calling_model() -> None:
    console.print()
    console.print(_label("SESSION", "blue"), "[blue] → Forwarding prompt to model…[/blue]")


def message_received(text: str) -> None:
    console.print()
    console.print(
        Panel(
            Text(_mono(text, 2000), style="white"),
            title=_label("MODEL RESPONSE", "blue"),
            border_style="blue",
            padding=(0, 2),
        )
    )


# ---------------------------------------------------------------------------
# Parsed actions
# ---------------------------------------------------------------------------


def actions_parsed(actions: Sequence[Action]) -> None:
    console.print()
    table = Table(
        box=box.SIMPLE_HEAVY,
        border_style="cyan",
        show_header=True,
        header_style="bold cyan",
        padding=(0, 1),
    )
    table.add_column("#", justify="center", width=4)
    table.add_column("Action", style="bold white", width=16)
    table.add_column("Target", style="white")

    for index, action in enumerate(actions, start=1):
        table.add_row(str(index), action.type, escape(_mono(describe(action), 80)))

    console.print(
        Panel(
            table,
            title=_label(f"PARSER: {len(actions)} ACTION(S)", "cyan"),
            border_style="cyan",
            padding=(0, 1),
        )
    )


def no_actions() -> None:
    console.print()
    console.print(
        _label("PARSER", "cyan"),
        "[cyan] No actions found in the response — nothing to execute.[/cyan]",
    )


# ---------------------------------------------------------------------------
# Execution loop
# ---------------------------------------------------------------------------


def execution_start(total: int) -> None:
    console.print()
    console.print(Rule(f"[cyan]EXECUTION — {total} action(s)[/cyan]", style="cyan"))


def action_result(index: int, total: int, action: Action, response: Response) -> None:
    console.print()
    console.print(
        f"[bold cyan]  ACTION [{index + 1}/{total}][/bold cyan]  "
        f"[white]{action.type}[/white]  [dim]{escape(_mono(describe(action), 80))}[/dim]"
    )

    if not response.success and response.message == DENIED_MESSAGE:
        console.print(f"  [yellow]↳ Denied by policy[/yellow]  [dim]{escape(response.error or '')}[/dim]")
        return

    if response.success:
        console.print(f"  [bold green]✓ {escape(response.message)}[/bold green]")
        if response.data:
            console.print(f"  [dim white]{escape(_mono(response.data, 140))}[/dim white]")
    else:
        console.print(f"  [bold red]✗ {escape(response.message)}[/bold red]")
        console.print(f"  [red]{escape(_mono(response.error or '', 140))}[/red]")


def execution_summary(actions: Sequence[Action], responses: Sequence[Response]) -> None:
    console.print()
    table = Table(
        box=box.SIMPLE_HEAVY,
        border_style="dim",
        show_header=True,
        header_style="bold dim",
        padding=(0, 1),
    )
    table.add_column("#", justify="center", width=4)
    table.add_column("Action", width=16)
    table.add_column("Result", justify="center", width=8)
    table.add_column("Message", style="dim white")

    for index, (action, response) in enumerate(zip(actions, responses), start=1):
        result = "[bold green]✓[/bold green]" if response.success else "[bold red]✗[/bold red]"
        table.add_row(str(index), action.type, result, escape(_mono(response.message, 60)))

    console.print(
        Panel(
            table,
            title="[dim]EXECUTION SUMMARY[/dim]",
            border_style="dim",
            padding=(0, 1),
        )
    )


# ---------------------------------------------------------------------------
# Final result
# ---------------------------------------------------------------------------


def final_result(result: str) -> None:
    console.print()
    console.print(
        Panel(
            Text(result, style="white"),
            title=_label("RESULT", "green"),
            border_style="green",
            padding=(1, 2),
        )
    )
    console.print()
