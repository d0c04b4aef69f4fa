"""Domain events emitted while talking to the recommendation API."""
