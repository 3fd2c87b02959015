import asyncio

from restopos.auth import validate_credentials
from restopos.password_modal import PasswordModal
from restopos.pos_app import PosApp
from restopos.report_modal import ReportModal


def _run(session, username, password, *keys):
    """Log in through the login screen, press ``keys``; returns the app and the screen left on top."""
    app = PosApp(session)
    seen = {}

    async def scenario():
        async with app.run_test() as pilot:
            await pilot.pause()
            await pilot.press(*username, "enter", *password, "enter")
            await pilot.pause()
            if keys:
                await pilot.press(*keys)
                await pilot.pause()
            seen["screen"] = app.screen

    asyncio.run(scenario())
    return app, seen["screen"]


def test_admin_lands_on_dashboard_with_sales(session):
    app, screen = _run(session, "admin", "admin123")

    assert app.user.is_admin
    assert isinstance(screen, ReportModal)
    assert screen.include_sales is True


def test_cashier_dashboard_hides_sales(session):
    _, screen = _run(session, "cajero", "cajero123", "g")

    assert isinstance(screen, ReportModal)
    assert screen.include_sales is False


def test_admin_changes_password_from_settings(session):
    app, screen = _run(
        session,
        "admin",
        "admin123",
        "escape",
        "s",
        *"admin123",
        "enter",
        *"secreto1",
        "enter",
        *"secreto1",
        "enter",
    )

    assert not isinstance(screen, PasswordModal)
    assert app.system_status == "Contraseña actualizada exitosamente."
    assert validate_credentials(session.store, "admin", "secreto1").is_admin
    assert validate_credentials(session.store, "admin", "admin123") is None


def test_cashier_cannot_open_settings(session):
    app, screen = _run(session, "cajero", "cajero123", "s")

    assert not isinstance(screen, PasswordModal)
    assert "administradores" in app.system_status


def test_category_filter_cycles_through_categories(session):
    app, _ = _run(session, "cajero", "cajero123", "f", "f")

    assert app.input_state == "active"
    assert app._active_category().name == "Bebidas"
    assert [product.id for product in app._filtered_results()] == ["soda", "water"]


def test_admin_deletes_highlighted_product_after_confirmation(session):
    _run(session, "admin", "admin123", "escape", "f", "f", "ctrl+d")
    assert session.catalog.find_product("soda") is not None

    _run(session, "admin", "admin123", "escape", "f", "f", "ctrl+d", "ctrl+d")
    assert session.catalog.find_product("soda") is None
    assert [product.id for product in session.catalog.products_in_category("6")] == ["water"]
