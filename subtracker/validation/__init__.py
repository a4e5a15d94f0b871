"""Input validation package."""

from subtracker.validation.amount import parse_amount

__all__ = ["parse_amount"]
