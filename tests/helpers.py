"""
Helper functions for tests.

Provides factory functions for stored order documents (the camelCase dicts
the ordering screens save), so each test only spells out the slots it cares
about.
"""


def make_lunch(**overrides) -> dict:
    """Create a complete customer lunch document.

    Defaults price at 13000 (soup, regular protein) and pass customer
    validation. Keyword arguments replace whole slots.
    """
    lunch = {
        "id": 0,
        "soup": {"id": "s1", "name": "Sancocho"},
        "soupReplacement": None,
        "principle": [{"id": "p1", "name": "Frijoles"}],
        "principleReplacement": None,
        "protein": {"id": "pr1", "name": "Res asada"},
        "drink": {"id": "d1", "name": "Limonada"},
        "sides": [{"name": "Arroz"}, {"name": "Ensalada"}],
        "additions": [],
        "cutlery": True,
        "time": {"id": "t1", "name": "12:30"},
        "address": {
            "address": "Calle 137 #128b-10",
            "addressType": "house",
            "phoneNumber": "3001234567",
        },
        "payment": {"name": "Efectivo"},
        "notes": "",
    }
    lunch.update(overrides)
    return lunch


def make_table_lunch(**overrides) -> dict:
    """Create a lunch rung up by a waiter for a table."""
    lunch = make_lunch(
        time=None,
        address=None,
        cutlery=None,
        tableNumber="5",
        orderType="table",
    )
    lunch.update(overrides)
    return lunch


def make_breakfast(**overrides) -> dict:
    """Create a complete customer breakfast document ("Desayuno completo")."""
    breakfast = {
        "id": 0,
        "type": {
            "id": "bt1",
            "name": "Desayuno completo",
            "steps": ["type", "broth", "eggs", "riceBread", "drink", "protein"],
            "requiresProtein": False,
        },
        "broth": {"name": "Caldo de costilla"},
        "eggs": {"name": "Huevos pericos"},
        "riceBread": {"name": "Arroz"},
        "drink": {"name": "Chocolate"},
        "protein": None,
        "additions": [],
        "cutlery": True,
        "time": {"name": "8:00"},
        "address": {"address": "Calle 137 #128b-10", "addressType": "house"},
        "payment": {"name": "Nequi"},
        "orderType": "takeaway",
        "notes": "",
    }
    breakfast.update(overrides)
    return breakfast


def make_addition(name: str, price: int = 0, quantity: int = 1, **extra) -> dict:
    """Create an addition document."""
    return {"name": name, "price": price, "quantity": quantity, **extra}
