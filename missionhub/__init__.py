"""Mission participation service: lifecycle, question answers and admin mailings."""

__version__ = "1.0.0"
