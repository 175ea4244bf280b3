"""School daily follow-up report generator."""

__version__ = "1.0.0"
