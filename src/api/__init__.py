"""HTTP layer for the phonebook."""
