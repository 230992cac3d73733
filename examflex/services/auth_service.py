"""
Auth Service
HTTP Basic authentication against the configured client registry
"""
import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError, VerifyMismatchError
from fastapi import Depends
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from examflex.config import settings
from examflex.core import Messages, UnauthorizedException

logger = logging.getLogger(__name__)

# Password hasher instance
_password_hasher = PasswordHasher()

security = HTTPBasic(auto_error=False)


def hash_password(plain_password: str) -> str:
    """Hash a client password using Argon2 (for provisioning API_CLIENTS)"""
    return _password_hasher.hash(plain_password)


def verify_password(plain_password: str, password_hash: str) -> bool:
    """Verify a plain password against a hash."""
    try:
        return _password_hasher.verify(password_hash, plain_password)
    except VerifyMismatchError:
        return False
    except (InvalidHashError, VerificationError) as e:
        logger.warning(f"Password verification error: {e}")
        return False


def authenticate_client(credentials: HTTPBasicCredentials = Depends(security)) -> str:
    """FastAPI dependency: the authenticated client username"""
    if credentials is None:
        raise UnauthorizedException("Missing or invalid Authorization header")

    password_hash = settings.API_CLIENTS.get(credentials.username)
    if not password_hash or not verify_password(credentials.password, password_hash):
        logger.warning(f"Rejected credentials for client '{credentials.username}'")
        raise UnauthorizedException(Messages.UNAUTHORIZED)

    return credentials.username
