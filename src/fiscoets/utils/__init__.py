"""Utility functions for fiscoets."""

from fiscoets.utils.date_parser import parse_date
from fiscoets.utils.money import parse_amount, round_euro, format_euro

__all__ = ["parse_date", "parse_amount", "round_euro", "format_euro"]
