"""Client, interactive shell, transports and an in-memory device model for a smart-house controller."""

__version__ = "0.1.0"