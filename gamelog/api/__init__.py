# API package
from .transport import Transport, AiohttpTransport, ApiRequest, ApiResponse
from .client import ApiClient
from .authentication import AuthenticationApi
from .game_entries import GameEntriesApi
from .games import GamesApi
from .users import UsersApi
