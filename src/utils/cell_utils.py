"""
Cell Coercion Utilities

Safe conversion of raw spreadsheet cell values (as returned by openpyxl
or pandas) into ints, floats and text. Blank cells never raise.
"""

from typing import Optional

import numpy as np
import pandas as pd


class CellConverter:
    """Helper class for safe cell type conversions."""

    @staticmethod
    def is_blank(value) -> bool:
        """
        Check whether a cell value is empty.

        Args:
            value: Raw cell value

        Returns:
            True for None, NaN and whitespace-only strings
        """
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, (float, np.floating)):
            return bool(pd.isna(value))
        return False

    @staticmethod
    def to_int(value) -> Optional[int]:
        """
        Convert a cell value to int.

        Floats are rounded to the nearest integer (half to even).

        Args:
            value: Raw cell value

        Returns:
            Integer value, or None for blank cells

        Raises:
            ValueError: If the value is not numeric
        """
        if CellConverter.is_blank(value):
            return None

        if isinstance(value, bool):
            return int(value)
        if isinstance(value, (int, np.integer)):
            return int(value)
        if isinstance(value, (float, np.floating)):
            return int(round(float(value)))

        text = str(value).strip()
        try:
            return int(text)
        except ValueError:
            return int(round(float(text)))

    @staticmethod
    def safe_int(value, default: Optional[int] = None) -> Optional[int]:
        """
        Safely convert value to int.

        Args:
            value: Raw cell value
            default: Value returned for blank or unparseable cells

        Returns:
            Integer value or default
        """
        try:
            result = CellConverter.to_int(value)
        except (ValueError, TypeError, OverflowError):
            return default
        return default if result is None else result

    @staticmethod
    def to_float(value) -> Optional[float]:
        """
        Convert a cell value to float.

        Strings are parsed with '.' as the decimal separator.

        Raises:
            ValueError: If the value is not numeric
        """
        if CellConverter.is_blank(value):
            return None

        if isinstance(value, (int, float, np.integer, np.floating)):
            return float(value)

        return float(str(value).strip())

    @staticmethod
    def safe_float(value, default: Optional[float] = None) -> Optional[float]:
        """Safely convert value to float, returning default on failure."""
        try:
            result = CellConverter.to_float(value)
        except (ValueError, TypeError):
            return default
        return default if result is None else result

    @staticmethod
    def safe_text(value) -> Optional[str]:
        """Return stripped cell text, or None for blank cells."""
        if CellConverter.is_blank(value):
            return None
        return str(value).strip()
