"""Domain layer: models, ports and events with no infrastructure dependencies."""
