"""Layout geometry for the wiring graph."""
