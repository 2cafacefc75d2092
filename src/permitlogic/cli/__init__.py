"""Command-line interface for Permitlogic."""
