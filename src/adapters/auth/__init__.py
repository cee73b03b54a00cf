"""Auth provider adapters."""

from .postgres import PostgresAuthProvider

__all__ = ["PostgresAuthProvider"]
