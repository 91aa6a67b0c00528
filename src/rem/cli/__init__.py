"""rem command-line interface."""
