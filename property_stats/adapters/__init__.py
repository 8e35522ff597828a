"""Command-line adapters of the statistics engine."""
