"""Event agenda, directory and registration backend."""
