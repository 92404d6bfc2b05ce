"""Run named shell scripts on demand or from global shortcuts."""

__version__ = "0.1.0"
