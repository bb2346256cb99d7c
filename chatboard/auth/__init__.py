"""Authentication: password hashing and account management."""
