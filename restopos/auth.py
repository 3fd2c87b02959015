"""Login, role permissions and the remembered user session.

Credentials are compared in plaintext; this terminal runs on a single trusted
machine and the store is not a security boundary.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from restopos.constant import DEFAULT_CREDENTIALS, DEFAULT_TAB_BY_ROLE, MIN_PASSWORD_LENGTH, ROLE_PERMISSIONS
from restopos.persistence import CREDENTIALS_KEY, SESSION_KEY, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class User:
    """A logged-in user."""

    username: str
    role: str
    display_name: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @property
    def default_tab(self) -> str:
        return DEFAULT_TAB_BY_ROLE.get(self.role, "billing")

    def can(self, tab: str) -> bool:
        """Whether this user's role may open ``tab``."""
        return tab in ROLE_PERMISSIONS.get(self.role, ())


def _user_from_record(username: str, record: dict[str, Any]) -> User:
    return User(
        username=username,
        role=str(record.get("role", "cajero")),
        display_name=str(record.get("displayName", username)),
    )


def validate_credentials(store: KeyValueStore, username: str, password: str) -> User | None:
    """Check ``username``/``password`` against stored credentials, falling back to the built-ins.

    A stored record replaces the built-in one for that username, so a changed
    admin password retires ``admin123``.
    """
    username = username.strip()
    stored = store.get(CREDENTIALS_KEY, {}) or {}
    record = stored.get(username) if isinstance(stored, dict) else None
    source = "stored"
    if not isinstance(record, dict):
        record = DEFAULT_CREDENTIALS.get(username)
        source = "default"

    if record is not None and record.get("password") == password:
        logger.info("login ok user=%s source=%s", username, source)
        return _user_from_record(username, record)

    logger.info("login rejected user=%s", username)
    return None


def change_admin_password(store: KeyValueStore, current: str, new: str, confirm: str) -> None:
    """Replace the stored admin password; raises ValueError on any failed check."""
    if validate_credentials(store, "admin", current) is None:
        raise ValueError("La contraseña actual es incorrecta.")
    if len(new) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"La nueva contraseña debe tener al menos {MIN_PASSWORD_LENGTH} caracteres.")
    if new != confirm:
        raise ValueError("Las contraseñas no coinciden.")

    stored = store.get(CREDENTIALS_KEY, {}) or {}
    stored["admin"] = {**DEFAULT_CREDENTIALS["admin"], "password": new}
    store.set(CREDENTIALS_KEY, stored)
    logger.info("admin password changed")


def save_session(store: KeyValueStore, user: User, remember_me: bool = False) -> dict[str, Any]:
    session = {
        "username": user.username,
        "role": user.role,
        "displayName": user.display_name,
        "loginTime": datetime.now().isoformat(),
        "rememberMe": remember_me,
    }
    store.set(SESSION_KEY, session)
    return session


def get_session(store: KeyValueStore) -> dict[str, Any] | None:
    """The stored session record, or None when nobody is logged in."""
    session = store.get(SESSION_KEY)
    if not isinstance(session, dict) or "username" not in session:
        return None
    return session


def remembered_username(store: KeyValueStore) -> str:
    """Username to pre-fill on the login screen, if the last login asked to be remembered."""
    session = get_session(store)
    if session is not None and session.get("rememberMe"):
        return str(session["username"])
    return ""


def clear_session(store: KeyValueStore) -> None:
    store.delete(SESSION_KEY)
