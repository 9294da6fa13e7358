import logging
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from pymongo.errors import PyMongoError

from storeadmin.core.errors import DocumentNotFound, InvalidTransition, StoreAdminError, UploadError, WizardError
from storeadmin.core.security import JWTError, decode_token
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import AuthState
from storeadmin.services.uploads import UploadClient

logger = logging.getLogger(__name__)

oauth2 = OAuth2PasswordBearer(tokenUrl="/api/auth/token", auto_error=False)

REVOKED_TOKENS = "revoked_tokens"


def get_uploader() -> UploadClient:
    return UploadClient()


def get_auth_state(token: Optional[str] = Depends(oauth2), store: DocumentStore = Depends(get_store)) -> AuthState:
    """Resolves the bearer token once per request. Anything unusable is anonymous."""
    if not token:
        return AuthState()
    try:
        payload = decode_token(token)
    except JWTError:
        return AuthState()
    jti = payload.get("jti")
    if jti and store.find_one(REVOKED_TOKENS, {"jti": jti}):
        return AuthState()
    return AuthState(user=payload.get("sub"), email=payload.get("email"), token_id=jti)


def require_user(auth: AuthState = Depends(get_auth_state)) -> AuthState:
    if auth.user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="You must be logged in.",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth


def to_http(e: Exception, thing: str = "Document") -> HTTPException:
    """Maps a caught failure to the response the admin sees."""
    if isinstance(e, DocumentNotFound):
        return HTTPException(status_code=404, detail=f"{thing} not found.")
    if isinstance(e, WizardError):
        return HTTPException(status_code=422, detail={"step": e.step, "message": e.message})
    if isinstance(e, InvalidTransition):
        return HTTPException(status_code=409, detail=e.message)
    if isinstance(e, UploadError):
        return HTTPException(status_code=502, detail=e.message)
    if isinstance(e, StoreAdminError):
        return HTTPException(status_code=422, detail=e.message)
    if isinstance(e, PyMongoError):
        logger.error("Document store error: %s", e)
        return HTTPException(status_code=503, detail="Document store unavailable. Please try again.")
    return HTTPException(status_code=500, detail=str(e))
