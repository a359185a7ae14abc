"""Blog backend: users, posts and comments behind a JSON API.

- Users register with email + password and log in to get a session cookie.
- Posts and comments belong to the user who created them.
- Only the owner (or an admin) can delete a post or comment; only the owner can read it.

See README for setup and usage.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
