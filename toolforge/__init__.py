"""Toolforge: chat completions with plugin tools the model can extend."""

__version__ = "0.1.0"
