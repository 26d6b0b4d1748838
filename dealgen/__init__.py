"""Product content synthesis for an affiliate deals catalog."""

__version__ = "1.0.0"
