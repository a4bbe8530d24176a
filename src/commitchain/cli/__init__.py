"""Command line interface for commitchain."""
