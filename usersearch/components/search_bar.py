"""Search bar component."""

from textual.widgets import Input
from textual.message import Message


class SearchBar(Input):
    """Username input. Every edit is reported; debouncing happens downstream."""

    class Edited(Message):
        """Emitted with the full text after each edit."""

        def __init__(self, value: str) -> None:
            self.value = value
            super().__init__()

    def __init__(
        self,
        placeholder: str = "Username",
        id: str | None = None,
    ) -> None:
        super().__init__(placeholder=placeholder, id=id)

    def on_input_changed(self, event: Input.Changed) -> None:
        event.stop()
        self.post_message(self.Edited(event.value))
