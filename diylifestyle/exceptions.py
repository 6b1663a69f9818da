"""Error taxonomy shared by the store, auth and web layers."""


class StoreError(Exception):
    """Raised when the database is unavailable or a write fails."""

    pass


class DuplicateUser(Exception):
    """Raised when a local account is created with a username already taken."""

    pass


class AuthFailure(Exception):
    """Raised when the identity provider denies or fails the OAuth handshake.

    Recoverable: the user is sent back to the login page and may retry.
    """

    pass


class InvalidSession(Exception):
    """Raised when a session cookie is missing, malformed, badly signed or expired."""

    pass


class LoginRequired(Exception):
    """Raised by the auth gate when a protected route is hit anonymously."""

    pass
