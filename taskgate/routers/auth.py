import json
from typing import Any, Dict

from fastapi import APIRouter, Depends, Request, status
from sqlmodel import Session

from ..database import get_db
from ..errors import Forbidden, Unauthenticated, ValidationError
from ..schemas.base import parse_payload
from ..schemas.user import AuthResponse, ProfileResponse, TokenClaims, User as UserSchema, UserCreate, UserLogin
from ..security import TokenService, get_token_service
from ..stores import CredentialStore

router = APIRouter()


def _get_token_from_request(request: Request):
    auth_header = request.headers.get("Authorization", "")
    scheme, _, credential = auth_header.partition(" ")
    if scheme.lower() != "bearer":
        return None
    return credential.strip() or None


def get_current_identity(
    request: Request,
    tokens: TokenService = Depends(get_token_service),
) -> TokenClaims:
    """Resolve the caller from the bearer token.

    Declared ahead of any body dependency so that authentication failures
    are reported before input validation ones.
    """
    token = _get_token_from_request(request)
    if not token:
        raise Unauthenticated()

    claims = tokens.verify(token)
    if claims is None:
        raise Forbidden()

    request.state.identity = claims
    return claims


async def read_json_body(request: Request) -> Dict[str, Any]:
    """Parse the request body as a JSON object; an empty body counts as ``{}``."""
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        data = json.loads(raw)
    except ValueError:
        raise ValidationError("Malformed JSON body")
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def get_credential_store(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> CredentialStore:
    return CredentialStore(db, tokens)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    payload: Dict[str, Any] = Depends(read_json_body),
    store: CredentialStore = Depends(get_credential_store),
):
    """Create a new user account."""
    data = parse_payload(UserCreate, payload)
    token, user = store.register(data.username, data.email, data.password)
    return AuthResponse(
        message="User registered successfully",
        token=token,
        user=UserSchema.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    payload: Dict[str, Any] = Depends(read_json_body),
    store: CredentialStore = Depends(get_credential_store),
):
    """Sign in and get a token."""
    data = parse_payload(UserLogin, payload)
    token, user = store.authenticate(data.email, data.password)
    return AuthResponse(
        message="Login successful",
        token=token,
        user=UserSchema.model_validate(user),
    )


@router.get("/profile", response_model=ProfileResponse)
def read_profile(
    identity: TokenClaims = Depends(get_current_identity),
    store: CredentialStore = Depends(get_credential_store),
):
    """Get the current user's stored profile."""
    user = store.get_profile(identity.id)
    return ProfileResponse(user=UserSchema.model_validate(user))
