from .credential_store import SQLAlchemyCredentialStore

__all__ = ["SQLAlchemyCredentialStore"]
