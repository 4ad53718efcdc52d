"""CLI module for plugforge."""
