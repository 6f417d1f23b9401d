"""Small helpers shared across certgate."""
