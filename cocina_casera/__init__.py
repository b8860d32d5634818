"""Order pricing, grouping and summary core for the Cocina Casera ordering app."""

__version__ = "0.1.0"
