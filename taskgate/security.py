from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import JWTError, jwt
from pydantic import ValidationError as SchemaError

from .config import ACCESS_TOKEN_EXPIRE_MINUTES, SECRET_KEY
from .schemas.user import TokenClaims

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    password_bytes = plain_password.encode('utf-8')[:72]
    hashed_bytes = hashed_password.encode('utf-8') if isinstance(hashed_password, str) else hashed_password
    try:
        return bcrypt.checkpw(password_bytes, hashed_bytes)
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password using bcrypt directly."""
    password_bytes = password.encode('utf-8')[:72]  # Truncate to 72 bytes (bcrypt limit)
    salt = bcrypt.gensalt()
    hashed = bcrypt.hashpw(password_bytes, salt)
    return hashed.decode('utf-8')


class TokenService:
    """Issues and verifies signed, time-bound identity tokens.

    Tokens are stateless: there is no revocation list, so a leaked token
    stays valid until its ``exp`` claim passes.
    """

    def __init__(
        self,
        secret_key: str = SECRET_KEY,
        expire_minutes: int = ACCESS_TOKEN_EXPIRE_MINUTES,
        algorithm: str = ALGORITHM,
    ):
        self.secret_key = secret_key
        self.expires_delta = timedelta(minutes=expire_minutes)
        self.algorithm = algorithm

    def issue(self, claims: TokenClaims, expires_delta: Optional[timedelta] = None) -> str:
        """Create a JWT embedding the identity claims."""
        to_encode = claims.model_dump(exclude={"exp"})
        expire = datetime.now(timezone.utc) + (expires_delta or self.expires_delta)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[TokenClaims]:
        """Return the identity claims, or None for any tampered, expired or malformed token."""
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except JWTError:
            return None
        try:
            claims = TokenClaims.model_validate(payload)
        except SchemaError:
            return None
        # Tokens without an expiry were not issued by us
        if claims.exp is None:
            return None
        return claims


token_service = TokenService()


def get_token_service() -> TokenService:
    """Dependency returning the process-wide token service."""
    return token_service
