"""Command-line interface for bizdash."""
