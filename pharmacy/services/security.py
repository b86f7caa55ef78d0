# pharmacy/services/security.py
import abc
import hmac
import re
import secrets

from passlib.context import CryptContext

from pharmacy.utils.settings import PASSWORD_SCHEMES
from pharmacy.utils.logging import get_logger

logger = get_logger(__name__)

_LEGACY_PATTERN = re.compile(r"^-?\d{1,10}$")


def legacy_checksum(password: str) -> str:
    """
    Stary "hash" hasel: h = h * 31 + c po jednostkach UTF-16, obcinany do
    32 bitow ze znakiem, zapisany dziesietnie. Nie jest kryptograficzny,
    zostaje tylko do weryfikacji hasel zapisanych przed migracja.
    """
    data = password.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return str(h)


def is_legacy_checksum(stored: str) -> bool:
    return bool(stored) and _LEGACY_PATTERN.match(stored) is not None


class PasswordHasher(abc.ABC):
    """Interfejs hashowania hasel uzywany przez serwis kont."""

    @abc.abstractmethod
    def hash(self, password: str) -> str:
        ...

    @abc.abstractmethod
    def verify(self, password: str, stored: str) -> bool:
        ...

    @abc.abstractmethod
    def needs_rehash(self, stored: str) -> bool:
        ...

    def unusable(self) -> str:
        #losowe haslo dla kont zakladanych przez Google
        return self.hash(secrets.token_urlsafe(32))


class CryptContextHasher(PasswordHasher):
    """
    Hasher oparty o passlib CryptContext.
    Rozpoznaje tez stare sumy kontrolne i oznacza je do przehashowania.
    """

    def __init__(self, schemes: list[str] | None = None):
        self.context = CryptContext(schemes=schemes or PASSWORD_SCHEMES, deprecated="auto")

    def hash(self, password: str) -> str:
        return self.context.hash(password)

    def verify(self, password: str, stored: str) -> bool:
        if not stored:
            return False
        if is_legacy_checksum(stored):
            return hmac.compare_digest(legacy_checksum(password), stored)
        try:
            return self.context.verify(password, stored)
        except ValueError:
            logger.warning("Nierozpoznany format hasla w bazie")
            return False

    def needs_rehash(self, stored: str) -> bool:
        if is_legacy_checksum(stored):
            return True
        return self.context.needs_update(stored)


_default_hasher: PasswordHasher | None = None


def get_password_hasher() -> PasswordHasher:
    global _default_hasher
    if _default_hasher is None:
        _default_hasher = CryptContextHasher()
    return _default_hasher
