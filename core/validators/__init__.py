"""
Validators module

Data quality validators for raw chart feeds
"""

from core.validators.chart_data import SOURCE_FIELDS, RawPointValidator

__all__ = ["RawPointValidator", "SOURCE_FIELDS"]
