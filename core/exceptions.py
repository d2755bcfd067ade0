"""
Chart engine exceptions

Only programmer errors raise. Bad data (unparsable timestamps, non-numeric
fields, short series, stale viewport indices) is dropped, padded with None
or clamped by the stage that sees it.
"""


class ChartEngineError(Exception):
    """Base class for chart engine errors"""


class InvalidPeriodError(ChartEngineError, ValueError):
    """Indicator period (or candle interval) is not usable"""


class UnknownIndicatorError(ChartEngineError, ValueError):
    """Indicator type is not registered"""


class PreferenceStoreError(ChartEngineError):
    """Preference backend failed to load or save a selection"""
