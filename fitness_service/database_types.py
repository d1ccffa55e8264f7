# fitness_service/database_types.py
import json
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from sqlalchemy.types import LargeBinary, TypeDecorator

from .core.config import settings


# --- Encryption Setup ---
def build_fernet(key: Optional[str], backend: str) -> Optional[Fernet]:
    """
    Creates the cipher for encrypted columns.

    The in-memory backend never writes these columns, so it may run without a
    key. The SQL backend refuses to start without one.
    """
    if key:
        return Fernet(key.encode())
    if backend == "memory":
        return None
    raise ValueError("ENCRYPTION_KEY must be set to store body measurements.")


fernet = build_fernet(settings.ENCRYPTION_KEY, settings.STORAGE_BACKEND)


class EncryptedJSON(TypeDecorator):
    """
    Column type holding a JSON document as a Fernet token.

    Progress body measurements go through this type, so the raw column never
    contains readable numbers.
    """
    impl = LargeBinary
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return fernet.encrypt(json.dumps(value).encode("utf-8"))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        try:
            plain = fernet.decrypt(value)
        except InvalidToken as exc:
            raise ValueError("Stored measurements could not be decrypted; check ENCRYPTION_KEY.") from exc
        return json.loads(plain)
