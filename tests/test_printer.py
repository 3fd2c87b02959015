from datetime import datetime

from restopos.models import LineItem, LocationId
from restopos.orders import Order
from restopos.printer import format_kitchen_ticket_lines, format_money, format_receipt_lines


def _order(**kwargs):
    items = [LineItem("burger", "Hamburguesa Clásica", 8.5, 2), LineItem("soda", "Coca Cola", 2.5, 1)]
    return Order(id="a1b2c3d4e5f6", items=items, **kwargs)


def test_format_money():
    assert format_money(3) == "$3.00"


def test_kitchen_ticket_lines():
    lines = format_kitchen_ticket_lines(_order(location=LocationId("mesa", 3)))
    assert lines == ["Mesa 3", "Orden #d4e5f6", "2x Hamburguesa Clásica", "1x Coca Cola"]


def test_kitchen_ticket_without_location():
    assert format_kitchen_ticket_lines(_order())[0] == "Sin ubicación"


def test_receipt_lines():
    order = _order(location=LocationId("domicilio", 2), tax_rate=0.16)
    lines = format_receipt_lines(order, printed_at=datetime(2024, 3, 1, 14, 5))

    assert "RESTAURANTE - RECIBO" in lines
    assert "Fecha: 01/03/2024 14:05" in lines
    assert "Ubicación: Dom 2" in lines
    assert "Hamburguesa Clásica x2 $17.00" in lines
    assert "Subtotal: $19.50" in lines
    assert "IVA (16%): $3.12" in lines
    assert "TOTAL: $22.62" in lines
    assert lines[-1] == "¡Gracias por su visita!"


def test_receipt_omits_tax_line_when_untaxed():
    lines = format_receipt_lines(_order(tax_rate=0.0), printed_at=datetime(2024, 3, 1))
    assert not any(line.startswith("IVA") for line in lines)
    assert not any(line.startswith("Ubicación") for line in lines)
    assert "TOTAL: $19.50" in lines
