"""Catalogue administration backend."""
