"""Editable static catalog, credential and label configuration."""

from __future__ import annotations

DEFAULT_CATEGORIES: list[dict[str, str]] = [
    {"id": "1", "name": "Hamburguesas", "color": "#FF6B6B", "icon": "fas fa-hamburger"},
    {"id": "2", "name": "Sandwiches", "color": "#4ECDC4", "icon": "fas fa-bread-slice"},
    {"id": "3", "name": "Hot Dogs", "color": "#45B7D1", "icon": "fas fa-hotdog"},
    {"id": "4", "name": "Ensaladas", "color": "#96CEB4", "icon": "fas fa-leaf"},
    {"id": "5", "name": "Carnes", "color": "#FFA500", "icon": "fas fa-drumstick-bite"},
    {"id": "6", "name": "Bebidas", "color": "#3498DB", "icon": "fas fa-wine-bottle"},
    {"id": "7", "name": "Adicionales", "color": "#9B59B6", "icon": "fas fa-plus-circle"},
    {"id": "8", "name": "Mazorcadas", "color": "#E67E22", "icon": "fas fa-seedling"},
    {"id": "9", "name": "Toppings", "color": "#E74C3C", "icon": "fas fa-star"},
]

SAMPLE_PRODUCTS: list[dict[str, object]] = [
    {"id": "1", "name": "Hamburguesa Clásica", "categoryId": "1", "price": 8.50, "stock": 25,
     "description": "Hamburguesa con carne, lechuga, tomate y queso"},
    {"id": "2", "name": "Hamburguesa Doble", "categoryId": "1", "price": 12.00, "stock": 20,
     "description": "Hamburguesa doble con carne, lechuga, tomate y queso"},
    {"id": "3", "name": "Hamburguesa Especial", "categoryId": "1", "price": 10.50, "stock": 15,
     "description": "Hamburguesa con bacon, queso, lechuga y tomate"},
    {"id": "4", "name": "Sandwich de Pollo", "categoryId": "2", "price": 7.50, "stock": 18,
     "description": "Sandwich con pechuga de pollo, lechuga y mayonesa"},
    {"id": "5", "name": "Sandwich de Jamón", "categoryId": "2", "price": 6.50, "stock": 22,
     "description": "Sandwich con jamón, queso y lechuga"},
    {"id": "6", "name": "Sandwich Vegetariano", "categoryId": "2", "price": 7.00, "stock": 12,
     "description": "Sandwich con vegetales frescos y queso"},
    {"id": "7", "name": "Hot Dog Clásico", "categoryId": "3", "price": 5.50, "stock": 30,
     "description": "Hot dog con salchicha, mostaza y ketchup"},
    {"id": "8", "name": "Hot Dog Especial", "categoryId": "3", "price": 7.00, "stock": 20,
     "description": "Hot dog con salchicha, cebolla, mostaza y ketchup"},
    {"id": "9", "name": "Ensalada César", "categoryId": "4", "price": 8.50, "stock": 15,
     "description": "Ensalada con lechuga, crutones, parmesano y aderezo César"},
    {"id": "10", "name": "Ensalada Mixta", "categoryId": "4", "price": 7.50, "stock": 12,
     "description": "Ensalada con lechuga, tomate, cebolla y aceite de oliva"},
    {"id": "11", "name": "Bistec a la Plancha", "categoryId": "5", "price": 15.00, "stock": 10,
     "description": "Bistec de res a la plancha con guarnición"},
    {"id": "12", "name": "Pollo a la Plancha", "categoryId": "5", "price": 12.50, "stock": 15,
     "description": "Pechuga de pollo a la plancha con guarnición"},
    {"id": "13", "name": "Coca Cola", "categoryId": "6", "price": 2.50, "stock": 50,
     "description": "Refresco de cola 350ml"},
    {"id": "14", "name": "Agua Mineral", "categoryId": "6", "price": 1.50, "stock": 40,
     "description": "Agua mineral natural 500ml"},
    {"id": "15", "name": "Jugo de Naranja", "categoryId": "6", "price": 3.00, "stock": 25,
     "description": "Jugo de naranja natural 300ml"},
    {"id": "16", "name": "Papas Fritas", "categoryId": "7", "price": 3.50, "stock": 30,
     "description": "Porción de papas fritas"},
    {"id": "17", "name": "Onion Rings", "categoryId": "7", "price": 4.00, "stock": 20,
     "description": "Aros de cebolla fritos"},
    {"id": "18", "name": "Nuggets de Pollo", "categoryId": "7", "price": 5.00, "stock": 25,
     "description": "6 nuggets de pollo con salsa"},
    {"id": "19", "name": "Mazorcada Clásica", "categoryId": "8", "price": 4.50, "stock": 15,
     "description": "Mazorca con mantequilla y sal"},
    {"id": "20", "name": "Mazorcada con Queso", "categoryId": "8", "price": 5.50, "stock": 12,
     "description": "Mazorca con queso rallado y mantequilla"},
    {"id": "21", "name": "Queso Extra", "categoryId": "9", "price": 1.50, "stock": 30,
     "description": "Queso extra para hamburguesas"},
    {"id": "22", "name": "Bacon Extra", "categoryId": "9", "price": 2.00, "stock": 25,
     "description": "Bacon extra para hamburguesas"},
    {"id": "23", "name": "Cebolla Caramelizada", "categoryId": "9", "price": 1.00, "stock": 20,
     "description": "Cebolla caramelizada para hamburguesas"},
]

# 1003 is still open, so a freshly seeded store shows Barra 2 occupied.
SAMPLE_ORDERS: list[dict[str, object]] = [
    {
        "id": "1001",
        "items": [
            {"productId": "1", "name": "Hamburguesa Clásica", "price": 8.50, "quantity": 2},
            {"productId": "13", "name": "Coca Cola", "price": 2.50, "quantity": 2},
            {"productId": "16", "name": "Papas Fritas", "price": 3.50, "quantity": 1},
        ],
        "status": "completed",
        "location": "mesa_3",
        "isPaid": True,
        "kitchenTicketPrinted": True,
        "createdAt": "2024-01-15 12:30:00",
        "updatedAt": "2024-01-15 13:00:00",
        "completedAt": "2024-01-15 13:00:00",
    },
    {
        "id": "1002",
        "items": [
            {"productId": "7", "name": "Hot Dog Clásico", "price": 5.50, "quantity": 1},
            {"productId": "9", "name": "Ensalada César", "price": 8.50, "quantity": 1},
            {"productId": "14", "name": "Agua Mineral", "price": 1.50, "quantity": 2},
        ],
        "status": "completed",
        "location": "domicilio_1",
        "isPaid": True,
        "kitchenTicketPrinted": True,
        "createdAt": "2024-01-15 13:15:00",
        "updatedAt": "2024-01-15 13:45:00",
        "completedAt": "2024-01-15 13:45:00",
    },
    {
        "id": "1003",
        "items": [
            {"productId": "4", "name": "Sandwich de Pollo", "price": 7.50, "quantity": 1},
            {"productId": "15", "name": "Jugo de Naranja", "price": 3.00, "quantity": 1},
            {"productId": "19", "name": "Mazorcada Clásica", "price": 4.50, "quantity": 1},
        ],
        "status": "pending",
        "location": "barra_2",
        "createdAt": "2024-01-15 14:00:00",
    },
]

DEFAULT_CREDENTIALS: dict[str, dict[str, str]] = {
    "admin": {"username": "admin", "password": "admin123", "role": "admin", "displayName": "Administrador"},
    "cajero": {"username": "cajero", "password": "cajero123", "role": "cajero", "displayName": "Cajero"},
}

ROLE_PERMISSIONS: dict[str, tuple[str, ...]] = {
    "admin": ("dashboard", "billing", "inventory", "orders", "reports", "settings"),
    "cajero": ("dashboard", "billing", "orders"),
}

DEFAULT_TAB_BY_ROLE: dict[str, str] = {
    "admin": "dashboard",
    "cajero": "billing",
}

STATUS_LABELS: dict[str, str] = {
    "pending": "Pendiente",
    "preparing": "Preparando",
    "ready": "Listo",
    "completed": "Completado",
    "cancelled": "Cancelado",
}

LOCATION_LABELS: dict[str, str] = {
    "mesa": "Mesa",
    "domicilio": "Dom",
    "barra": "Barra",
}

MIN_PASSWORD_LENGTH = 6
