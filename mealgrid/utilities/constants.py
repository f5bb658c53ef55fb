from typing import Final

DAYS: Final[tuple[str, ...]] = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"
)
MEAL_TYPES: Final[tuple[str, ...]] = ("Breakfast", "Lunch", "Dinner")

ROLE_OWNER: Final[str] = "owner"
ROLE_EDITOR: Final[str] = "editor"
ROLE_VIEWER: Final[str] = "viewer"
ROLES: Final[tuple[str, ...]] = (ROLE_OWNER, ROLE_EDITOR, ROLE_VIEWER)
SHARE_ROLES: Final[tuple[str, ...]] = (ROLE_EDITOR, ROLE_VIEWER)
WRITE_ROLES: Final[tuple[str, ...]] = (ROLE_OWNER, ROLE_EDITOR)

# Invite links: hours offered by the share dialog (1 day .. 30 days)
SHARE_LINK_DEFAULT_HOURS: Final[int] = 7 * 24
SHARE_LINK_MAX_HOURS: Final[int] = 30 * 24

OAUTH_STATE_COOKIE: Final[str] = "oauth_state"
OAUTH_STATE_MAX_AGE: Final[int] = 5 * 60
GOOGLE_AUTH_URL: Final[str] = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URL: Final[str] = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL: Final[str] = "https://www.googleapis.com/oauth2/v3/userinfo"
GOOGLE_CERTS_URL: Final[str] = "https://www.googleapis.com/oauth2/v3/certs"
GOOGLE_ISSUERS: Final[tuple[str, ...]] = ("accounts.google.com", "https://accounts.google.com")
GOOGLE_SCOPES: Final[tuple[str, ...]] = (
    "https://www.googleapis.com/auth/userinfo.email",
    "https://www.googleapis.com/auth/userinfo.profile",
    "openid",
)

# Key under which the local store keeps its meal list
MEALS_KEY: Final[str] = "meals"
