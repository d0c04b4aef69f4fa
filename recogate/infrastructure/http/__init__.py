"""HTTP transport adapters for the recommendation API."""
