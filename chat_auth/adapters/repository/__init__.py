"""Repository adapters - Database implementations."""

from .postgres import PostgresAccountSession, PostgresAccountStore, run_migrations

__all__ = ["PostgresAccountSession", "PostgresAccountStore", "run_migrations"]
