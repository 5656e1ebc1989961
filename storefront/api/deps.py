# storefront/api/deps.py
from fastapi import Depends, HTTPException, Request

from storefront.domain.schemas import User
from storefront.repos.base import Storage
from storefront.utils.settings import SESSION_COOKIE_NAME


def get_storage(request: Request) -> Storage:
    return request.app.state.storage


def get_current_user(request: Request, storage: Storage = Depends(get_storage)) -> User:
    sid = request.cookies.get(SESSION_COOKIE_NAME)
    session = storage.session_store.get(sid) if sid else None
    if not session:
        raise HTTPException(status_code=401, detail="Brak autoryzacji")

    user = storage.get_user(session["user_id"])
    if not user:
        raise HTTPException(status_code=401, detail="Brak autoryzacji")
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Wymagane uprawnienia administratora")
    return user
