"""FundRaiser utility functions."""

from src.utils.helpers import format_utc_datetime

__all__ = ["format_utc_datetime"]
