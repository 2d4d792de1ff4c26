"""Results list component."""

import webbrowser

from textual.widgets import Static, ListItem, ListView
from textual.reactive import reactive
from textual.message import Message
from rich.text import Text

from usersearch.models import Account


class AccountItem(ListItem):
    """Single account row."""

    def __init__(self, account: Account) -> None:
        super().__init__()
        self.account = account

    def compose(self):
        name = Text()
        name.append("👤 ", style="")
        name.append(self.account.display_name, style="bold")
        name.append(f"  #{self.account.id}", style="dim")
        yield Static(name, classes="account-name")

        # Avatars are not downloaded; show where they live instead.
        if self.account.avatar_url:
            yield Static(f"    {self.account.avatar_url}", classes="account-avatar")


class ResultsList(ListView):
    """Accounts for the last search, in provider order."""

    accounts: reactive[tuple[Account, ...]] = reactive((), always_update=True)

    class AccountSelected(Message):
        """Emitted when an account is selected."""

        def __init__(self, account: Account) -> None:
            self.account = account
            super().__init__()

    def watch_accounts(self, accounts: tuple[Account, ...]) -> None:
        """Rebuild rows when the accounts change."""
        self.clear()
        for account in accounts:
            self.append(AccountItem(account))

    def on_list_view_selected(self, event: ListView.Selected) -> None:
        """Open the selected profile in the browser."""
        if isinstance(event.item, AccountItem):
            account = event.item.account
            if account.profile_url:
                webbrowser.open(account.profile_url)
            self.post_message(self.AccountSelected(account))
