"""
Order Errors.

Pricing never raises; these exceptions come from validation (blocking the
order submission) and from grouping (an item whose shape is unknown).
"""


class OrderError(Exception):
    """Base class for order core errors."""


class InvalidLineItemKind(OrderError):
    """Raised when an item is neither a lunch nor a breakfast."""

    def __init__(self, item, position: int | None = None):
        self.item = item
        self.position = position
        where = f" at position {position + 1}" if position is not None else ""
        super().__init__(
            f"Cannot determine the kind of line item{where}: {type(item).__name__}"
        )


class ValidationError(OrderError):
    """Base class for errors that block an order submission.

    item_index is 1-based, matching what the customer sees ("Almuerzo #2").
    """

    def __init__(self, message: str, item_index: int, step: int = 0):
        self.item_index = item_index
        self.step = step
        super().__init__(message)


class MissingField(ValidationError):
    """Raised when a mandatory slot of a line item is empty."""

    def __init__(self, field: str, item_index: int, step: int = 0, item_label: str = "Almuerzo"):
        self.field = field
        super().__init__(
            f"Por favor, completa el paso de {field} para el {item_label} #{item_index}.",
            item_index,
            step,
        )


class UnconfiguredAddition(ValidationError):
    """Raised when an addition that needs a protein or replacement has none."""

    def __init__(self, addition_name: str, item_index: int, item_label: str = "Almuerzo"):
        self.addition_name = addition_name
        super().__init__(
            f'Por favor, selecciona una opción para "{addition_name}" en {item_label} #{item_index}.',
            item_index,
        )
