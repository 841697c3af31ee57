"""ERG tracking backend: Discord login and form submissions."""

__version__ = "0.1.0"
