"""
Authentication for FastAPI
Issues and validates signed session tokens for the dashboard user
Supports bypassing authentication in local development mode
"""

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional, Tuple
import logging
import jwt

from constants.constants import (
    ENVIRONMENT,
    SESSION_SECRET,
    DASHBOARD_USERNAME,
    SESSION_COOKIE_NAME,
    SESSION_MAX_AGE,
    SESSION_ALGORITHM
)

logger = logging.getLogger(__name__)


class SessionAuthValidator:
    """Issues and validates HS256 session tokens."""

    def __init__(self, secret: Optional[str] = SESSION_SECRET, username: Optional[str] = DASHBOARD_USERNAME):
        self.secret = secret
        self.username = username

        if not self.secret:
            logger.warning("SESSION_SECRET is not set, session tokens cannot be issued or validated")

    def check_username(self, username: Optional[str]) -> bool:
        """Only the configured dashboard user may log in."""
        if not self.username or not username:
            return False
        return username.strip().lower() == self.username.strip().lower()

    def issue_token(self, username: str) -> str:
        """
        Sign a session token for a user.

        Raises:
            ValueError: SESSION_SECRET is not configured
        """
        if not self.secret:
            raise ValueError("SESSION_SECRET environment variable is not set")

        now = datetime.now(timezone.utc)
        payload = {
            'sub': username,
            'iat': now,
            'exp': now + timedelta(seconds=SESSION_MAX_AGE),
        }
        return jwt.encode(payload, self.secret, algorithm=SESSION_ALGORITHM)

    def validate_token(self, token: Optional[str]) -> Tuple[bool, Optional[Dict], Optional[str]]:
        """
        Validate a session token.

        Args:
            token: The JWT token string to validate

        Returns:
            Tuple of (is_valid, decoded_payload, error_message)
        """
        if not token:
            return False, None, "No token provided"

        if not self.secret:
            return False, None, "Session secret is not configured"

        try:
            decoded = jwt.decode(
                token,
                self.secret,
                algorithms=[SESSION_ALGORITHM],
                options={"require": ["sub", "exp"]}
            )
        except jwt.ExpiredSignatureError:
            return False, None, "Token has expired"
        except jwt.InvalidSignatureError:
            return False, None, "Invalid token signature"
        except jwt.DecodeError as e:
            return False, None, f"Token decode error: {str(e)}"
        except jwt.InvalidTokenError as e:
            return False, None, f"Token validation failed: {str(e)}"

        if not self.check_username(decoded.get('sub')):
            return False, None, "Unknown user"

        return True, decoded, None


# Don't auto-error, missing credentials are handled in verify_token
security = HTTPBearer(auto_error=False)
auth_validator = SessionAuthValidator()


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    """Prefer the bearer header and fall back to the session cookie."""
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(SESSION_COOKIE_NAME)


async def verify_token(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Dict:
    """
    Validates the session token and returns its payload.
    In local development mode (ENVIRONMENT=local), authentication is bypassed.

    Add this dependency to every mutating endpoint:
        @app.post("/api/dcf")
        def save(user: Dict = Depends(verify_token)):
            ...

    Raises:
        HTTPException: 401 if the token is missing, invalid or expired
    """
    if ENVIRONMENT == 'local':
        logger.info("Local development mode: bypassing authentication")
        return {
            'sub': 'local-dev-user',
            'environment': 'local',
        }

    token = extract_token(request, credentials)
    if not token:
        logger.warning("Authentication failed: no credentials provided")
        raise HTTPException(
            status_code=401,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    is_valid, payload, error = auth_validator.validate_token(token)

    if not is_valid:
        logger.warning(f"Authentication failed: {error}")
        raise HTTPException(
            status_code=401,
            detail=error or "Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )

    logger.info(f"Authenticated user: {payload.get('sub')}")
    return payload
