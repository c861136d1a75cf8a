"""Session cookie names and attributes."""

SESSION_COOKIE_USER_ID = "carteira-user-id"
SESSION_COOKIE_TOKEN = "carteira-token"  # noqa: S105

SESSION_COOKIE_OPTIONS = {
    "httponly": True,
    "secure": True,
    "samesite": "strict",
}
