"""Property statistics aggregation engine."""
