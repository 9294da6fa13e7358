import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm

from storeadmin.api.deps import REVOKED_TOKENS, get_auth_state, require_user
from storeadmin.core.security import create_token, verify_password
from storeadmin.db.mongo import DocumentStore, get_store
from storeadmin.models.schemas import AdminInfo, AuthState, LoginRequest, LoginResponse, Token

logger = logging.getLogger(__name__)

router = APIRouter()

ADMINS = "admins"


def authenticate(store: DocumentStore, email: str, password: str) -> dict:
    admin = store.find_one(ADMINS, {"email": email.strip().lower()})
    if not admin or not verify_password(password, admin.get("password", "")):
        logger.warning("Failed sign-in for %s", email)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password.")
    return admin


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, store: DocumentStore = Depends(get_store)):
    if not payload.email or not payload.password:
        raise HTTPException(status_code=400, detail="Please enter email and password.")
    admin = authenticate(store, payload.email, payload.password)
    token = create_token(admin["id"], email=admin["email"])
    logger.info("Admin %s signed in", admin["email"])
    return LoginResponse(
        token=Token(access_token=token),
        user=AdminInfo(id=admin["id"], email=admin["email"], full_name=admin.get("fullName")),
    )


@router.post("/token", response_model=Token)
def token(form_data: OAuth2PasswordRequestForm = Depends(), store: DocumentStore = Depends(get_store)):
    admin = authenticate(store, form_data.username, form_data.password)
    return Token(access_token=create_token(admin["id"], email=admin["email"]))


@router.post("/logout")
def logout(auth: AuthState = Depends(require_user), store: DocumentStore = Depends(get_store)):
    if auth.token_id:
        store.create(REVOKED_TOKENS, {"jti": auth.token_id, "user": auth.user, "revokedAt": datetime.now(timezone.utc)})
    logger.info("Admin %s signed out", auth.email or auth.user)
    return {"message": "Logged out successfully!"}


@router.get("/me", response_model=AuthState)
def me(auth: AuthState = Depends(get_auth_state)):
    return auth
