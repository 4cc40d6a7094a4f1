# Auth package
from .credentials import CredentialStore
from .refresh import RefreshCoordinator, RefreshState
