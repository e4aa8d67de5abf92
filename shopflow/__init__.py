"""shopflow - login gate and shopping cart state for a two-screen shop."""

__version__ = "1.0.0"
