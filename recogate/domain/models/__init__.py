"""Domain models (value objects) for recommendation requests and results."""
