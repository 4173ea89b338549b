"""Profile e-mail validation service."""
