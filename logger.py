"""
Console output: timestamped status lines, sections and banners via rich.
Errors go to stderr so they survive `-q` and shell redirection of stdout.
"""
from datetime import datetime

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

console = Console(highlight=False)
console_err = Console(stderr=True, highlight=False)


def _ts() -> str:
    return datetime.now().strftime("%H:%M:%S")


def section(title: str) -> None:
    console.rule(f"[bold cyan]{title}[/bold cyan]")


def info(msg: str) -> None:
    console.print(f"[dim]{_ts()}[/dim]  [blue]ℹ[/blue]  {msg}")


def success(msg: str) -> None:
    console.print(f"[dim]{_ts()}[/dim]  [bold green]✔[/bold green]  {msg}")


def warn(msg: str) -> None:
    console.print(f"[dim]{_ts()}[/dim]  [bold yellow]⚠[/bold yellow]  {msg}")


def error(msg: str) -> None:
    console_err.print(f"[dim]{_ts()}[/dim]  [bold red]✖[/bold red]  {msg}")


def step(index: int, total: int, msg: str) -> None:
    console.print(f"[dim]{_ts()}[/dim]  [bold magenta][{index}/{total}][/bold magenta]  {msg}")


def banner(title: str, subtitle: str = "") -> None:
    text = Text(title, style="bold cyan")
    if subtitle:
        text.append(f"\n{subtitle}", style="dim")
    console.print(Panel(text, border_style="cyan"))


def table(title: str, columns: list[str], rows: list[tuple]) -> None:
    """Print *rows* under *columns*; only the last column may wrap."""
    tbl = Table(title=title, show_lines=False)
    for i, col in enumerate(columns):
        tbl.add_column(col, style="bold cyan" if i == 0 else None, no_wrap=i < len(columns) - 1)
    for row in rows:
        tbl.add_row(*(str(cell) for cell in row))
    console.print(tbl)


def confirm(question: str) -> bool:
    return Confirm.ask(question, console=console, default=False)


def duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    m, s = divmod(int(seconds), 60)
    return f"{m}m{s:02d}s"
