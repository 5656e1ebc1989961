# storefront/api/routers/auth.py
from fastapi import APIRouter, Depends, HTTPException, Request, Response

from storefront.api.deps import get_current_user, get_storage
from storefront.domain.schemas import LoginIn, User, UserCreate, UserRead
from storefront.repos.base import Storage
from storefront.services.user_service import UserService
from storefront.utils.settings import SESSION_COOKIE_NAME, SESSION_TTL_SECONDS

router = APIRouter(prefix="/api", tags=["auth"])


def _start_session(request: Request, response: Response, storage: Storage, user: User):
    # stara sesja z cookie przestaje być ważna
    old_sid = request.cookies.get(SESSION_COOKIE_NAME)
    if old_sid:
        storage.session_store.destroy(old_sid)

    sid = storage.session_store.create({"user_id": user.id})
    response.set_cookie(
        SESSION_COOKIE_NAME,
        sid,
        max_age=SESSION_TTL_SECONDS,
        httponly=True,
        samesite="lax",
    )


@router.post("/register", response_model=UserRead, status_code=201)
def register(payload: UserCreate, request: Request, response: Response, storage: Storage = Depends(get_storage)):
    """
    Rejestruje użytkownika i od razu go loguje.
    """
    service = UserService(storage)
    try:
        user = service.register(payload)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _start_session(request, response, storage, user)
    return user


@router.post("/login", response_model=UserRead)
def login(payload: LoginIn, request: Request, response: Response, storage: Storage = Depends(get_storage)):
    service = UserService(storage)
    user = service.authenticate(payload.username, payload.password)
    if not user:
        raise HTTPException(status_code=401, detail="Nieprawidłowe dane logowania")

    _start_session(request, response, storage, user)
    return user


@router.post("/logout", status_code=204)
def logout(request: Request, storage: Storage = Depends(get_storage)):
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    if sid:
        storage.session_store.destroy(sid)

    response = Response(status_code=204)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return response


@router.get("/user", response_model=UserRead)
def current_user(user: User = Depends(get_current_user)):
    return user
