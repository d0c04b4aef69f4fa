"""Infrastructure Layer:

Concrete adapters for the domain ports (HTTP transport, console display)
plus configuration and logging setup.
"""
