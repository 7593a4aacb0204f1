"""HTTP API for the Legal Review system."""
