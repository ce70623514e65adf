"""Custom column types."""

from sqlalchemy import LargeBinary
from sqlalchemy.types import TypeDecorator

from app.services.crypto import decrypt, encrypt


class EncryptedText(TypeDecorator):
    """Text column stored as AES-256-GCM ciphertext.

    Values are plaintext on the Python side, so attribute change tracking
    keeps working on the real value. The ``context`` is bound to the
    ciphertext as AAD, which prevents copying ciphertext between columns.
    """

    impl = LargeBinary
    cache_ok = True

    def __init__(self, context: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.context = context

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return encrypt(value, aad=self.context)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return decrypt(bytes(value), aad=self.context)
