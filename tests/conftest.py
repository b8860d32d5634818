import pytest

import cocina_casera.config as config_mod
from cocina_casera.orders.catalog import Catalog
from cocina_casera.orders.models import OrderChannel, OrderContext, UserRole
from cocina_casera.orders.pricing import PricingEngine


@pytest.fixture
def customer():
    """Context of a customer ordering delivery from the web app."""
    return OrderContext(role=UserRole.CUSTOMER)


@pytest.fixture
def waiter():
    """Context of a waiter ringing up a table order."""
    return OrderContext(role=UserRole.WAITER, channel=OrderChannel.TABLE)


@pytest.fixture
def engine():
    """Pricing engine with the default price table."""
    return PricingEngine()


@pytest.fixture
def threshold(monkeypatch):
    """Pin the grouping threshold to its default regardless of the local env."""
    monkeypatch.setattr(config_mod, "GROUPING_DIFF_THRESHOLD", 3)
    return 3


@pytest.fixture
def catalog():
    """A small menu covering every slot."""
    return Catalog.model_validate({
        "soups": [
            {"id": "s1", "name": "Sancocho"},
            {"id": "s2", "name": "Sin sopa"},
            {"id": "s3", "name": "Solo bandeja"},
        ],
        "soupReplacements": [{"id": "sr1", "name": "Remplazo por Sopa"}],
        "principles": [
            {"id": "p1", "name": "Frijoles"},
            {"id": "p2", "name": "Lentejas NUEVO"},
            {"id": "p3", "name": "Arroz con pollo"},
            {"id": "p4", "name": "Remplazo por Principio"},
        ],
        "proteins": [
            {"id": "pr1", "name": "Res asada"},
            {"id": "pr2", "name": "Mojarra"},
            {"id": "pr3", "name": "Pechuga gratinada"},
            {"id": "pr4", "name": "Pechuga asada"},
        ],
        "drinks": [{"id": "d1", "name": "Limonada"}, {"id": "d2", "name": "Jugo de mango"}],
        "sides": [{"id": "sd1", "name": "Arroz"}, {"id": "sd2", "name": "Ensalada"}],
        "times": [{"id": "t1", "name": "12:30"}],
        "paymentMethods": [{"id": "pm1", "name": "Efectivo"}, {"id": "pm2", "name": "Nequi"}],
        "breakfastTypes": [
            {
                "id": "bt1",
                "name": "Desayuno completo",
                "steps": ["type", "broth", "eggs", "riceBread", "drink", "protein"],
                "requiresProtein": False,
            },
            {"id": "bt2", "name": "Solo caldo", "steps": ["type", "broth"]},
            {"id": "bt3", "name": "Solo huevos", "steps": ["type", "eggs", "riceBread"]},
            {"id": "bt4", "name": "Moñona", "steps": ["type", "protein"], "requiresProtein": True},
        ],
        "breakfastBroths": [
            {"id": "b1", "name": "Costilla"},
            {"id": "b2", "name": "Pescado"},
            {"id": "b3", "name": "Pata"},
            {"id": "b4", "name": "Pajarilla"},
        ],
    })
