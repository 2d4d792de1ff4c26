"""User Search - Main Textual Application."""

from pathlib import Path
from typing import Callable, Optional

from textual.app import App, ComposeResult
from textual.widgets import Header, Footer, Static
from textual.containers import Container, Vertical
from textual.binding import Binding

from usersearch.api import ApiClient
from usersearch.components import SearchBar, ResultsList, StatusBar
from usersearch.config import Settings, get_settings
from usersearch.models import SearchState
from usersearch.search import SearchClient, SearchPipeline


class UserSearchApp(App):
    """Search GitHub users as you type."""

    TITLE = "User Search"
    SUB_TITLE = "Find GitHub accounts"
    CSS_PATH = Path(__file__).parent / "styles" / "app.tcss"

    BINDINGS = [
        Binding("ctrl+q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False),
        Binding("/", "focus_search", "Search", show=True),
    ]

    def __init__(
        self,
        settings: Optional[Settings] = None,
        api: Optional[ApiClient] = None,
    ):
        super().__init__()
        self.settings = settings or get_settings()
        self.api = api or ApiClient(self.settings)
        self.pipeline = SearchPipeline(SearchClient(self.api), settings=self.settings)
        self._unsubscribe: Optional[Callable[[], None]] = None

    def compose(self) -> ComposeResult:
        yield Header()

        with Container(id="main"):
            with Vertical(id="search-section"):
                yield SearchBar(id="search-bar")

            with Vertical(id="results-section"):
                yield ResultsList(id="results-list")
                yield Static("", id="error-message")

        yield StatusBar(id="status-bar")
        yield Footer()

    async def on_mount(self) -> None:
        """Start the search pipeline and focus the input."""
        self.api.open()
        self._unsubscribe = self.pipeline.store.subscribe(self._render_state)
        self.run_worker(self.pipeline.run(), name="search-pipeline", exclusive=True)

        self.query_one("#error-message", Static).display = False
        self.query_one("#search-bar", SearchBar).focus()

    async def on_unmount(self) -> None:
        if self._unsubscribe:
            self._unsubscribe()
        await self.pipeline.aclose(wait=False)
        await self.api.aclose()

    def on_search_bar_edited(self, event: SearchBar.Edited) -> None:
        self.pipeline.push(event.value)

    def on_results_list_account_selected(
        self, event: ResultsList.AccountSelected
    ) -> None:
        status_bar = self.query_one("#status-bar", StatusBar)
        if event.account.profile_url:
            status_bar.set_message(f"Opened {event.account.display_name}")
        else:
            status_bar.set_message(f"No profile link for {event.account.display_name}")

    def _render_state(self, state: SearchState) -> None:
        """Reflect a new state snapshot on screen."""
        results_list = self.query_one("#results-list", ResultsList)
        error_message = self.query_one("#error-message", Static)

        if state.error_message:
            error_message.update(state.error_message)
            error_message.display = True
            results_list.display = False
        else:
            error_message.display = False
            results_list.display = True

        if results_list.accounts != state.user_list:
            results_list.accounts = state.user_list

        status_bar = self.query_one("#status-bar", StatusBar)
        status_bar.is_loading = state.is_loading
        status_bar.committed_term = state.committed_term or ""
        status_bar.result_count = len(state.user_list)

    def action_focus_search(self) -> None:
        """Focus the search bar."""
        self.query_one("#search-bar", SearchBar).focus()


def run_app(settings: Optional[Settings] = None) -> None:
    """Run the User Search app."""
    app = UserSearchApp(settings)
    app.run()


if __name__ == "__main__":
    run_app()
