"""CLI commands for bujo."""
