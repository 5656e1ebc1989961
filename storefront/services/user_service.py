from functools import lru_cache
import secrets

from storefront.domain.schemas import InsertUser, User, UserCreate
from storefront.repos.base import Storage
from storefront.services.credentials import hash_password, verify_password
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def _dummy_credential() -> str:
    return hash_password(secrets.token_hex(16))


class UserService:
    def __init__(self, storage: Storage):
        self.repo = storage

    def register(self, payload: UserCreate) -> User:
        if self.repo.get_user_by_username(payload.username):
            raise ValueError("Nazwa użytkownika jest już zajęta")
        if self.repo.get_user_by_email(payload.email):
            raise ValueError("Email jest już zarejestrowany")

        user = InsertUser(
            username=payload.username,
            email=payload.email,
            password=hash_password(payload.password),
            full_name=payload.full_name,
            is_admin=False,
        )
        created = self.repo.create_user(user)
        logger.info(f"User {created.id} registered")
        return created

    def authenticate(self, username: str, password: str) -> User | None:
        user = self.repo.get_user_by_username(username)
        # nieznany login: scrypt na atrapie, tyle samo pracy co dla istniejącego konta
        stored = user.password if user else _dummy_credential()
        if not verify_password(password, stored) or user is None:
            logger.info(f"Failed login for '{username}'")
            return None
        return user

    def get_user(self, user_id: int) -> User:
        user = self.repo.get_user(user_id)
        if not user:
            raise ValueError("Użytkownik nie istnieje")
        return user
