"""Command-line interface for aumos-group-permissions."""
