"""Product catalogue and user address services for an online shop."""

__version__ = "0.1.0"