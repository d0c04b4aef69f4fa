"""Core application logic: the gateway, classification and command handling."""
