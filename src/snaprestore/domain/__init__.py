"""Domain layer: restore engine and the ports it depends on."""
