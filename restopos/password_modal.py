"""Admin password change modal screen."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Container
from textual.events import Key
from textual.screen import ModalScreen
from textual.widgets import Static

from restopos.auth import change_admin_password
from restopos.persistence import KeyValueStore


class PasswordModal(ModalScreen[bool]):
    """Change the admin password; dismisses with True once it is stored."""

    CSS = """
    PasswordModal {
        align: center middle;
        background: $background 60%;
    }

    #password-dialog {
        width: 56;
        height: auto;
        border: round $secondary;
        background: $panel;
        padding: 1 2;
    }

    #password-title {
        text-style: bold;
        margin-bottom: 1;
        color: white;
    }

    #password-fields {
        color: white;
    }

    #password-error {
        color: #ffb3b3;
        margin: 1 0;
    }
    """

    _FIELDS = (
        ("current", "Contraseña actual"),
        ("new", "Nueva contraseña"),
        ("confirm", "Confirmar contraseña"),
    )

    def __init__(self, store: KeyValueStore) -> None:
        super().__init__()
        self.store = store
        self.values = {name: "" for name, _ in self._FIELDS}
        self.field_index = 0
        self.error = ""

    def compose(self) -> ComposeResult:
        with Container(id="password-dialog"):
            yield Static("Cambiar contraseña de administrador", id="password-title")
            yield Static(id="password-fields")
            yield Static(id="password-error")
            yield Static("Tab/↑/↓ campo. Enter guardar. Esc cancelar.")

    def on_mount(self) -> None:
        self._refresh_content()

    def on_key(self, event: Key) -> None:
        event.stop()
        name = self._FIELDS[self.field_index][0]
        if event.key in {"escape", "ctrl+c"}:
            self.dismiss(False)
            return
        if event.key == "enter":
            if self.field_index < len(self._FIELDS) - 1:
                self.field_index += 1
            else:
                self._confirm()
                return
        elif event.key in {"tab", "down"}:
            self.field_index = (self.field_index + 1) % len(self._FIELDS)
        elif event.key in {"shift+tab", "up"}:
            self.field_index = (self.field_index - 1) % len(self._FIELDS)
        elif event.key == "backspace":
            self.values[name] = self.values[name][:-1]
        elif event.is_printable and event.character:
            self.values[name] += event.character
            self.error = ""
        self._refresh_content()

    def _confirm(self) -> None:
        try:
            change_admin_password(self.store, self.values["current"], self.values["new"], self.values["confirm"])
        except ValueError as exc:
            self.error = str(exc)
            self.values = {name: "" for name, _ in self._FIELDS}
            self.field_index = 0
            self._refresh_content()
            return
        self.dismiss(True)

    def _refresh_content(self) -> None:
        lines = []
        for idx, (name, label) in enumerate(self._FIELDS):
            pointer = "➤ " if idx == self.field_index else "  "
            lines.append(f"{pointer}{label}: {'•' * len(self.values[name])}")
        self.query_one("#password-fields", Static).update("\n".join(lines))
        self.query_one("#password-error", Static).update(self.error)
