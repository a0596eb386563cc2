"""Inventory, shopping cart, purchases and sales reports for a small shop."""

__version__ = "0.1.0"