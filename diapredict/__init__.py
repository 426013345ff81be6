"""DiaPredict - AI-assisted diabetes risk assessment service."""

__version__ = "1.0.0"
