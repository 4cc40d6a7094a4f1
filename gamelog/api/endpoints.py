"""REST endpoint paths, relative to the API base URL."""

REGISTER_PATH = "/auth/register/"
LOGIN_PATH = "/auth/login/"
REFRESH_PATH = "/auth/refresh/"

SELF_USER_PATH = "/users/me/"
SELF_STATISTICS_PATH = "/users/me/statistics/"

GAME_ENTRIES_PATH = "/game-entries/"
GAMES_PATH = "/games/"

# Never get a bearer header and never trigger a token refresh
PUBLIC_PATHS = frozenset({REGISTER_PATH, LOGIN_PATH, REFRESH_PATH})


def game_entry_path(entry_id: int) -> str:
    return f"{GAME_ENTRIES_PATH}{entry_id}/"


def game_path(game_id: int) -> str:
    return f"{GAMES_PATH}{game_id}/"


def is_public_path(path: str) -> bool:
    return path in PUBLIC_PATHS
