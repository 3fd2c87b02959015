"""Login modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from restopos.auth import User, remembered_username, save_session, validate_credentials
from restopos.persistence import KeyValueStore


class LoginModal(ModalScreen[User]):
    """Prompt for username and password; dismisses with the authenticated user."""

    CSS = """
    LoginModal {
        align: center middle;
        background: $background 80%;
    }

    #login-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #login-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    .login-field {
        border: heavy $secondary;
        padding: 0 1;
        color: white;
    }

    #login-error {
        color: #ffb3b3;
        margin: 1 0;
    }

    #login-help {
        color: #dddddd;
    }
    """

    _FIELDS = ("username", "password")

    def __init__(self, store: KeyValueStore) -> None:
        super().__init__()
        self.store = store
        self.values = {"username": remembered_username(store), "password": ""}
        self.remember_me = bool(self.values["username"])
        self.active_field = "password" if self.values["username"] else "username"
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="login-dialog"):
            yield Static("Iniciar sesión", id="login-title")
            yield Static(id="login-username", classes="login-field")
            yield Static(id="login-password", classes="login-field")
            yield Static(id="login-remember")
            yield Static(id="login-error")
            yield Static("Tab cambia campo. Ctrl+R recordar usuario. Enter ingresar.", id="login-help")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        if event.key in {"tab", "shift+tab", "down", "up"}:
            idx = self._FIELDS.index(self.active_field)
            self.active_field = self._FIELDS[(idx + 1) % len(self._FIELDS)]
            self._refresh_content()
            event.stop()
            return

        if event.key == "ctrl+r":
            self.remember_me = not self.remember_me
            self._refresh_content()
            event.stop()
            return

        if event.key == "enter":
            if self.active_field == "username":
                self.active_field = "password"
                self._refresh_content()
            else:
                self._confirm()
            event.stop()
            return

        if event.key == "backspace":
            value = self.values[self.active_field]
            if value:
                self.values[self.active_field] = value[:-1]
                self.error = ""
                self._refresh_content()
            event.stop()
            return

        if event.is_printable and event.character:
            self.values[self.active_field] += event.character
            self.error = ""
            self._refresh_content()
            event.stop()

    def _confirm(self) -> None:
        user = validate_credentials(self.store, self.values["username"], self.values["password"])
        if user is None:
            self.error = "Usuario o contraseña incorrectos. Intenta de nuevo."
            self.values["password"] = ""
            self._refresh_content()
            return
        save_session(self.store, user, remember_me=self.remember_me)
        self.dismiss(user)

    def _refresh_content(self) -> None:
        for name in self._FIELDS:
            shown = self.values[name] if name == "username" else "•" * len(self.values[name])
            pointer = "➤ " if name == self.active_field else "  "
            label = "Usuario" if name == "username" else "Contraseña"
            self.query_one(f"#login-{name}", Static).update(f"{pointer}{label}: {shown}")
        self.query_one("#login-remember", Static).update(f"[{'x' if self.remember_me else ' '}] Recordarme")
        self.query_one("#login-error", Static).update(self.error or "")
