"""Europass résumé builder: manual or AI-assisted résumé editing with PDF export."""

__version__ = "0.1.0"
