"""Client for the SAP Alert Notification Service (ANS)."""

__version__ = "0.1.0"
