"""
Credential store backed by a JSON token file.

The file keeps the access/refresh pair under fixed keys so the session
survives restarts:

    {"access_token": "...", "refresh_token": "..."}

Reads are served from memory; the file is only read once, on construction.
"""
import json
import logging
import os
from typing import Optional

from ..models import CredentialPair
from ..utils.paths import TOKEN_JSON

logger = logging.getLogger(__name__)

ACCESS_TOKEN_KEY = 'access_token'
REFRESH_TOKEN_KEY = 'refresh_token'


class CredentialStore:
    """Holds the current credential pair for the session"""

    def __init__(self, token_file: Optional[str] = None):
        self.token_file = token_file or TOKEN_JSON
        self._pair: Optional[CredentialPair] = None
        self._load_tokens()

    def _load_tokens(self):
        """Load stored tokens"""
        try:
            if os.path.exists(self.token_file):
                with open(self.token_file, 'r') as f:
                    data = json.load(f)
                access_token = data.get(ACCESS_TOKEN_KEY)
                refresh_token = data.get(REFRESH_TOKEN_KEY)
                if access_token and refresh_token:
                    self._pair = CredentialPair(access=access_token, refresh=refresh_token)
                    logger.info("[Auth] Loaded tokens from file")
                else:
                    logger.warning(f"[Auth] {self.token_file} missing tokens - not authenticated")
        except Exception as e:
            logger.error(f"[Auth] Error loading tokens: {e}")
            self._pair = None

    def _save_tokens(self, pair: CredentialPair):
        """Save tokens to file"""
        try:
            os.makedirs(os.path.dirname(self.token_file), exist_ok=True)
            with open(self.token_file, 'w') as f:
                json.dump({
                    ACCESS_TOKEN_KEY: pair.access,
                    REFRESH_TOKEN_KEY: pair.refresh,
                }, f)
            logger.debug("[Auth] Saved tokens to file")
        except Exception as e:
            logger.error(f"[Auth] Error saving tokens: {e}")

    def get(self) -> Optional[CredentialPair]:
        return self._pair

    def set(self, pair: CredentialPair) -> None:
        self._pair = pair
        self._save_tokens(pair)

    def clear(self) -> None:
        self._pair = None
        try:
            if os.path.exists(self.token_file):
                os.remove(self.token_file)
                logger.info("[Auth] Removed stored tokens")
        except OSError as e:
            logger.error(f"[Auth] Error removing token file: {e}")

    @property
    def is_authenticated(self) -> bool:
        return self._pair is not None
