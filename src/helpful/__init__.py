"""Helpful - help desk accounts.

Account model, incoming mailbox routing and Chargify billing
synchronization.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
