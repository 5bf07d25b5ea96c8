"""Clinical trend and medication-change analysis engine."""

__version__ = "0.1.0"
