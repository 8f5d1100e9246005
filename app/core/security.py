from datetime import datetime, timezone, timedelta
from typing import Any, Union, Optional, Dict
import uuid

from jose import JWTError, jwt

# Use bcrypt directly to avoid passlib/bcrypt version conflicts
import bcrypt

# =====================================================
# Application Settings
# =====================================================
from app.core.config import settings


# bcrypt only looks at the first 72 bytes of the input
BCRYPT_MAX_BYTES = 72


# =====================================================
# Password Hashing Context
# =====================================================
class PasswordContext:
    """
    Simple password hashing and verification utility.
    Replaces passlib to avoid version conflicts.
    """

    @staticmethod
    def _encode(password: str) -> bytes:
        return password.encode("utf-8")[:BCRYPT_MAX_BYTES]

    @classmethod
    def hash(cls, password: str) -> str:
        """
        Hash a plain-text password using bcrypt.
        """
        return bcrypt.hashpw(
            cls._encode(password),
            bcrypt.gensalt(rounds=12)
        ).decode("utf-8")

    @classmethod
    def verify(cls, plain_password: str, hashed_password: str) -> bool:
        """
        Verify a plain-text password against a bcrypt hash.
        """
        try:
            return bcrypt.checkpw(
                cls._encode(plain_password),
                hashed_password.encode("utf-8")
            )
        except ValueError:
            # Stored value is not a bcrypt hash
            return False


# Password context instance
pwd_context = PasswordContext()


# =====================================================
# Token Type Constants
# =====================================================
TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


def _encode_token(
    subject: Union[str, Any],
    token_type: str,
    expire: datetime,
    now: datetime,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    to_encode = {
        "exp": expire,                     # Expiration time
        "sub": str(subject),               # Subject (user ID)
        "type": token_type,                # Token type
        "iat": now,                        # Issued at
        "jti": str(uuid.uuid4())           # Unique token ID
    }
    if extra_claims:
        to_encode.update(extra_claims)

    return jwt.encode(
        to_encode,
        settings.SECRET_KEY,
        algorithm=settings.ALGORITHM
    )


# =====================================================
# JWT Creation Functions
# =====================================================
def create_access_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create a JWT access token.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    return _encode_token(subject, TOKEN_TYPE_ACCESS, expire, now, extra_claims)


def create_refresh_token(
    subject: Union[str, Any],
    expires_delta: Optional[timedelta] = None,
    extra_claims: Optional[Dict[str, Any]] = None
) -> str:
    """
    Create a JWT refresh token.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS))
    return _encode_token(subject, TOKEN_TYPE_REFRESH, expire, now, extra_claims)


# =====================================================
# Token Verification Functions
# =====================================================
def verify_token(
    token: str,
    token_type: str = TOKEN_TYPE_ACCESS
) -> Optional[Dict[str, Any]]:
    """
    Verify a JWT token and return its payload if valid.
    """
    try:
        # Decode JWT (signature and expiry are checked here)
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )

        # Validate token type
        if payload.get("type") != token_type:
            return None

        return payload

    except JWTError:
        return None


def verify_access_token(token: str) -> Optional[str]:
    """
    Verify access token and return the subject.
    """
    payload = verify_token(token, TOKEN_TYPE_ACCESS)
    return payload.get("sub") if payload else None


def verify_refresh_token(token: str) -> Optional[str]:
    """
    Verify refresh token and return the subject.
    """
    payload = verify_token(token, TOKEN_TYPE_REFRESH)
    return payload.get("sub") if payload else None


# =====================================================
# Password Utility Functions
# =====================================================
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a password against its hashed value.
    """
    if not plain_password or not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    Hash a password.
    """
    if not password:
        raise ValueError("Password cannot be empty")
    return pwd_context.hash(password)


# =====================================================
# Token Helper Functions
# =====================================================
def create_token_pair(
    subject: Union[str, Any],
    extra_claims: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Create and return access + refresh token pair.
    """
    return {
        "access_token": create_access_token(subject, extra_claims=extra_claims),
        "refresh_token": create_refresh_token(subject, extra_claims=extra_claims),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60
    }
