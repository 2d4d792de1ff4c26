"""User Search - Entry Point."""

import asyncio
import sys
from typing import AsyncIterator, Optional, TextIO

import click
from rich.console import Console
from rich.table import Table

from usersearch.api import ApiClient
from usersearch.config import Settings, get_settings
from usersearch.logging import configure_logging
from usersearch.models import SearchFailed, SearchState, SearchSucceeded
from usersearch.search import SearchClient, SearchPipeline

console = Console()

LOG_LEVELS = ["debug", "info", "warning", "error", "critical"]


def make_api_client(settings: Settings) -> ApiClient:
    """Build the API client used by the commands."""
    return ApiClient(settings)


def render_accounts(state: SearchState, limit: Optional[int] = None) -> Table:
    """Render the accounts of ``state`` as a table."""
    accounts = state.user_list[:limit] if limit else state.user_list

    table = Table(title=f"Users matching \"{state.committed_term}\"")
    table.add_column("#", style="dim", justify="right")
    table.add_column("Username", style="bold cyan")
    table.add_column("ID", justify="right")
    table.add_column("Avatar", style="dim")

    for i, account in enumerate(accounts, 1):
        table.add_row(str(i), account.display_name, str(account.id), account.avatar_url or "-")

    return table


class StatePrinter:
    """Prints search progress and outcomes as the state changes."""

    def __init__(self, settings: Settings, out: Console):
        self.settings = settings
        self.out = out
        self._loading_for: Optional[str] = None
        self._last_result = None

    def __call__(self, state: SearchState) -> None:
        if not state.is_loading:
            self._loading_for = None
        elif state.committed_term != self._loading_for:
            self._loading_for = state.committed_term
            self.out.print(f"[yellow]⟳[/] Searching [cyan]\"{state.committed_term}\"[/]...")

        if state.last_result is None or state.last_result is self._last_result:
            return
        self._last_result = state.last_result
        if state.error_message:
            self.out.print(f"[red]{state.error_message}[/]")
        else:
            self.out.print(render_accounts(state))


async def read_lines(stream: TextIO) -> AsyncIterator[str]:
    """Yield lines of ``stream`` without blocking the event loop."""
    loop = asyncio.get_running_loop()
    while True:
        line = await loop.run_in_executor(None, stream.readline)
        if not line:
            return
        yield line.rstrip("\r\n")


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Log level (default: from config or info)",
)
@click.pass_context
def main(ctx, log_level: Optional[str]):
    """User Search - find GitHub accounts from the terminal.

    Run without arguments to launch the interactive TUI.
    """
    settings = ctx.obj if isinstance(ctx.obj, Settings) else get_settings()
    if log_level:
        settings = settings.model_copy(update={"log_level": log_level.upper()})
    ctx.obj = settings

    if ctx.invoked_subcommand is None:
        _run_tui(settings)


def _run_tui(settings: Settings) -> None:
    from usersearch.app import run_app

    configure_logging(settings.log_level, settings.logs_dir / "usersearch.log")
    run_app(settings)


@main.command()
@click.pass_obj
def tui(settings: Settings):
    """Launch interactive TUI."""
    _run_tui(settings)


@main.command()
@click.argument("term")
@click.option("-n", "--limit", default=None, type=click.IntRange(min=1), help="Number of users to show")
@click.pass_obj
def search(settings: Settings, term: str, limit: Optional[int]):
    """Search once for TERM, without debouncing.

    Example: usersearch search octocat
    """
    configure_logging(settings.log_level)

    if len(term) <= settings.min_query_length:
        console.print(
            f"[yellow]Search terms must be longer than "
            f"{settings.min_query_length} characters[/]"
        )
        sys.exit(2)

    async def _search():
        async with make_api_client(settings) as api:
            return await SearchClient(api).search(term)

    result = asyncio.run(_search())

    # A one-shot search has no earlier results to keep on screen.
    state = SearchState(current_search_term=term, committed_term=term).with_result(
        result, surface_decode_errors=True
    )

    if isinstance(result, SearchFailed):
        console.print(f"[red]Error:[/] {state.error_message}")
        sys.exit(1)

    if not state.user_list:
        console.print(f"[yellow]{state.error_message}[/]")
        return

    console.print(render_accounts(state, limit))
    if isinstance(result, SearchSucceeded) and result.total_count is not None:
        console.print(f"[dim]{result.total_count:,} users in total[/]")


@main.command()
@click.option(
    "-q",
    "--quiet-period",
    type=float,
    default=None,
    help="Seconds without edits before a line is searched (default: from config)",
)
@click.pass_obj
def watch(settings: Settings, quiet_period: Optional[float]):
    """Search as you type, reading edits from stdin.

    Each line is the full text of the search field after an edit.
    """
    if quiet_period is not None:
        if quiet_period <= 0:
            raise click.BadParameter("must be positive", param_hint="--quiet-period")
        settings = settings.model_copy(update={"debounce_seconds": quiet_period})
    configure_logging(settings.log_level)

    async def _watch():
        async with make_api_client(settings) as api:
            pipeline = SearchPipeline(SearchClient(api), settings=settings)
            pipeline.store.subscribe(StatePrinter(settings, console))
            runner = asyncio.create_task(pipeline.run())

            async for line in read_lines(sys.stdin):
                pipeline.push(line)

            # No more edits: the last line need not wait out its quiet period.
            pipeline.debouncer.close(flush=True)
            await runner
            await pipeline.aclose()

    asyncio.run(_watch())


if __name__ == "__main__":
    main()
