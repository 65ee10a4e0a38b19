"""Model table loading."""
