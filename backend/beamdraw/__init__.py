"""Motor de despiece para vigas de concreto reforzado."""

__version__ = "0.1.0"
