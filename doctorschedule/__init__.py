"""
Doctor availability engine: weekly templates, date overrides and schedule resolution.
"""

__version__ = "0.1.0"
