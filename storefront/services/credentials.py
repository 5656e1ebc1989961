# storefront/services/credentials.py
import hashlib
import hmac
import secrets

from storefront.utils.logging import get_logger

logger = get_logger(__name__)

SALT_BYTES = 16
KEY_LENGTH = 64
DELIMITER = "."

# scrypt cost parameters (16 MiB of memory per derivation)
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


class DerivationError(RuntimeError):
    """Key derivation primitive is unavailable or failed."""


def _derive(password: str, salt_hex: str) -> bytes:
    # the hex text of the salt is the KDF input, not its decoded bytes
    try:
        return hashlib.scrypt(
            password.encode("utf-8"),
            salt=salt_hex.encode("ascii"),
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
            dklen=KEY_LENGTH,
        )
    except AttributeError as e:
        raise DerivationError("scrypt niedostępny w tej wersji Pythona") from e
    except (ValueError, MemoryError) as e:
        raise DerivationError(f"Błąd wyprowadzania klucza scrypt: {e}") from e


def hash_password(password: str) -> str:
    """
    Zwraca "<derivedKeyHex>.<saltHex>" dla nowej, losowej soli.
    """
    salt_hex = secrets.token_hex(SALT_BYTES)
    derived = _derive(password, salt_hex)
    return f"{derived.hex()}{DELIMITER}{salt_hex}"


def _split(stored: str):
    if not isinstance(stored, str) or DELIMITER not in stored:
        return None, "missing delimiter"

    key_hex, salt_hex = stored.split(DELIMITER, 1)
    if not key_hex or not salt_hex:
        return None, "empty key or salt"

    try:
        expected = bytes.fromhex(key_hex)
        bytes.fromhex(salt_hex)
    except ValueError:
        return None, "non-hex content"

    return (expected, salt_hex), None


def verify_password(supplied: str, stored: str) -> bool:
    """
    Porównuje hasło z zapisanym credentialem w czasie stałym.

    Zły format credentialu to False (nie wyjątek), ale DerivationError
    przechodzi dalej do wywołującego.
    """
    parts, problem = _split(stored)
    if parts is None:
        logger.warning(f"Malformed stored credential: {problem}")
        return False

    expected, salt_hex = parts
    candidate = _derive(supplied, salt_hex)

    if hmac.compare_digest(candidate, expected):
        return True

    logger.debug("Password verification failed")
    return False
