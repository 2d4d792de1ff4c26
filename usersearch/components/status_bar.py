"""Status bar component."""

from typing import Optional

from textual.reactive import reactive
from textual.timer import Timer
from textual.widgets import Static


class StatusBar(Static):
    """Status bar showing the last committed search and its outcome."""

    is_loading: reactive[bool] = reactive(False)
    committed_term: reactive[str] = reactive("")
    result_count: reactive[int] = reactive(0)
    message: reactive[str] = reactive("")

    def render(self) -> str:
        parts = []

        if self.is_loading:
            parts.append("[yellow]⟳ Searching...[/]")
        elif self.committed_term:
            parts.append("[green]● Ready[/]")
        else:
            parts.append("[dim]● Type a username[/]")

        if self.committed_term:
            parts.append(f"[cyan]\"{self.committed_term}\"[/]")
            parts.append(f"[dim]{self.result_count:,} users[/]")

        if self.message:
            parts.append(f"[cyan]{self.message}[/]")

        return " │ ".join(parts)

    _message_timer: Optional[Timer] = None

    def set_message(self, message: str, duration: float = 3.0) -> None:
        """Show a note until it expires or the next search is committed."""
        self._stop_message_timer()
        self.message = message
        if duration > 0:
            self._message_timer = self.set_timer(duration, self._expire_message)

    def watch_committed_term(self) -> None:
        # Notes refer to the previous results.
        self._stop_message_timer()
        self.message = ""

    def _expire_message(self) -> None:
        self._message_timer = None
        self.message = ""

    def _stop_message_timer(self) -> None:
        if self._message_timer is not None:
            self._message_timer.stop()
            self._message_timer = None
