"""Carteira: shared subscription account management API."""
