"""
Bar history input: canonical models, record parsing and validation.
"""

from .models import Bar, PriceSeries
from .parsers import parse_bar, parse_bars
from .validators import BarValidator

__all__ = ["Bar", "PriceSeries", "parse_bar", "parse_bars", "BarValidator"]
