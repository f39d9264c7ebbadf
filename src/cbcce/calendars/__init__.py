"""Calendar layers built on the cycle engine."""
