"""Small shared helpers for identifiers and timestamps."""
