"""Adapters connecting the restore domain to concrete infrastructure."""
