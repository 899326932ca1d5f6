"""Command-line client for gNMI targets."""

__version__ = "0.1.0"
