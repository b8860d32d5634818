"""
Order Constants.

This module contains the names, labels and lookup tables shared by the
pricing, grouping and message modules. Catalog entries are still identified
by their display names in stored orders, so the names below are the ones
the kitchen uses on the menu.
"""

# =============================================================================
# Option Names
# =============================================================================

# Tag appended by the menu admin to recently added options
NEW_OPTION_TAG = " NUEVO"

NO_SELECTION_NAMES = {
    "sin sopa",
    "sin principio",
    "sin proteína",
    "sin proteina",
    "sin bebida",
}

TRAY_ONLY_NAMES = {"solo bandeja"}

# Both spellings appear in stored orders
REPLACEMENT_MARKERS = ("remplazo", "reemplazo")

# Rice dishes that already include protein and sides
COMBO_RICE_NAMES = {
    "arroz con pollo",
    "arroz paisa",
    "arroz tres carnes",
}

SOUP_REPLACEMENT_NAME = "Remplazo por Sopa"
PRINCIPLE_REPLACEMENT_NAME = "Remplazo por Principio"

PROTEIN_ADDITION_NAME = "Proteína adicional"

# =============================================================================
# Payment
# =============================================================================

UNSPECIFIED_PAYMENT = "No especificado"

# Substring -> canonical name, checked in order
PAYMENT_ALIASES = (
    ("efect", "Efectivo"),
    ("nequi", "Nequi"),
    ("davi", "Daviplata"),
)

# =============================================================================
# Order Channel Synonyms
# =============================================================================

TABLE_SYNONYMS = {"table", "mesa", "para mesa", "en mesa"}

TAKEAWAY_SYNONYMS = {
    "takeaway", "para llevar", "llevar", "take away", "take-away",
    "delivery", "deliveri", "deli", "domicilio", "domicilios", "a domicilio",
}

# =============================================================================
# Breakfast Price Table
# =============================================================================
# (table, takeaway) prices keyed by breakfast type, then by broth keyword.
# "default" covers a missing or unlisted broth.

BREAKFAST_PRICES = {
    "solo huevos": {
        "default": (7000, 8000),
    },
    "solo caldo": {
        "costilla": (7000, 8000),
        "pescado": (7000, 8000),
        "pata": (8000, 9000),
        "pajarilla": (9000, 10000),
        "default": (7000, 8000),
    },
    "desayuno completo": {
        "costilla": (11000, 12000),
        "pescado": (11000, 12000),
        "pata": (12000, 13000),
        "pajarilla": (13000, 14000),
        "default": (11000, 12000),
    },
    "moñona": {
        "default": (13000, 14000),
    },
}

UNKNOWN_BREAKFAST_PRICE = (7000, 8000)

# Checked longest first so "pajarilla" never matches as "pata"
BROTH_KEYWORDS = ("pajarilla", "costilla", "pescado", "pata")

# =============================================================================
# Display
# =============================================================================

ADDRESS_FIELDS = (
    "address",
    "address_type",
    "phone_number",
    "unit_details",
    "local_name",
    "recipient_name",
)

ADDRESS_TYPE_LABELS = {
    "house": "Casa/Apartamento Individual",
    "school": "Colegio/Oficina",
    "complex": "Conjunto Residencial",
    "shop": "Tienda/Local",
}

ASAP_TIME = "Lo más pronto posible"

# Stored cutlery answers, compared lowercased
CUTLERY_YES = {"sí", "si", "true", "1"}
CUTLERY_NO = {"no", "false", "0"}

# Stored drink names with known typos
DRINK_NAME_FIXES = {"Juego de mango": "Jugo de mango"}
