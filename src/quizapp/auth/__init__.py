"""Authentication and access control.

Learn: Two components share one signing secret:
1. CredentialAuthenticator → username/password → signed JWT (at login)
2. TokenGate → Authorization header → Claims / StoredIdentity (every request)

The secret arrives through AuthConfig, built once from settings at startup.
"""

from quizapp.auth.authenticator import AuthenticatedResult, CredentialAuthenticator
from quizapp.auth.claims import Claims
from quizapp.auth.gate import GateDecision, TokenGate
from quizapp.auth.jwt import AuthConfig

__all__ = [
    "AuthConfig",
    "AuthenticatedResult",
    "Claims",
    "CredentialAuthenticator",
    "GateDecision",
    "TokenGate",
]
