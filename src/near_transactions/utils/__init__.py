"""Helpers for NEAR amounts and gas."""

from .units import Units, parse_near_amount, format_near_amount, tgas

__all__ = ["Units", "parse_near_amount", "format_near_amount", "tgas"]
