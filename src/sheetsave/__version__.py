"""Version information for sheetsave."""
__version__ = "0.1.0"
