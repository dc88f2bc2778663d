"""
PostgreSQL repository adapter - Implements AccountRepository protocol.

This module provides the PostgreSQL implementation of the domain's
account store port using psycopg3 with raw SQL.

Error Translation:
-----------------
Every psycopg error is translated at this boundary so no driver type
reaches the domain:

1. **UniqueViolation** on account insert -> AccountAlreadyExists. The
   UNIQUE constraint on account.email is the real guard against two
   concurrent registrations for one email; the domain's existence check
   only short-circuits the common case.

2. **Anything else** (connection loss, pool timeout, statement timeout)
   -> StoreUnavailable. psycopg_pool.PoolTimeout derives from psycopg.Error,
   so a request that cannot borrow a connection in time lands here too.

Units of Work:
-------------
transaction() lends one pooled connection for the duration of a with block.
The pool's connection context commits on normal exit and rolls back when
the block raises, so domain exceptions raised between two writes undo both.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from importlib.resources import files
from importlib.resources.abc import Traversable
from uuid import UUID

import psycopg
from psycopg import errors
from psycopg_pool import ConnectionPool

from chat_auth.domain.exceptions import AccountAlreadyExists, StoreUnavailable

logger = logging.getLogger(__name__)

# Shipped as package data (chat_auth/migrations/*.sql)
MIGRATIONS_DIR = files("chat_auth").joinpath("migrations")


@contextmanager
def _translate_errors(operation: str, unique_email: bool = False) -> Iterator[None]:
    """Map psycopg errors raised during operation to domain exceptions."""
    try:
        yield
    except errors.UniqueViolation as e:
        if not unique_email:
            logger.error("%s failed: %s", operation, type(e).__name__)
            raise StoreUnavailable(operation) from e
        logger.warning("%s: unique constraint violated", operation)
        raise AccountAlreadyExists(operation) from e
    except psycopg.Error as e:
        logger.error("%s failed: %s", operation, type(e).__name__)
        raise StoreUnavailable(operation) from e


class PostgresAccountSession:
    """
    Account store operations bound to a single connection.

    Used inside PostgresAccountStore.transaction(); never commits by itself.
    """

    def __init__(self, conn: psycopg.Connection) -> None:
        self._conn = conn

    def exists_by_email(self, email: str) -> bool:
        sql = "SELECT EXISTS(SELECT 1 FROM account WHERE email = %s)"

        with _translate_errors("exists_by_email"), self._conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
            return bool(row and row[0])

    def insert_account(self, email: str, password_hash: str) -> UUID:
        """
        Insert an unverified account and return its generated id.

        Raises:
            AccountAlreadyExists: Email already present
            StoreUnavailable: Any other database failure
        """
        sql = """
            INSERT INTO account (email, password_hash)
            VALUES (%s, %s)
            RETURNING id
        """

        with _translate_errors("insert_account", unique_email=True), self._conn.cursor() as cursor:
            cursor.execute(sql, (email, password_hash))
            row = cursor.fetchone()
            if row is None:
                raise StoreUnavailable("insert_account returned no id")
            return row[0]

    def get_password_hash(self, email: str) -> str | None:
        sql = "SELECT password_hash FROM account WHERE email = %s"

        with _translate_errors("get_password_hash"), self._conn.cursor() as cursor:
            cursor.execute(sql, (email,))
            row = cursor.fetchone()
            return row[0] if row is not None else None

    def set_verified(self, account_id: UUID, verified: bool) -> None:
        # IS DISTINCT FROM keeps repeat activations from touching updated_at
        sql = """
            UPDATE account
            SET verified = %s, updated_at = NOW()
            WHERE id = %s AND verified IS DISTINCT FROM %s
        """

        with _translate_errors("set_verified"), self._conn.cursor() as cursor:
            cursor.execute(sql, (verified, account_id, verified))
            if cursor.rowcount == 0:
                logger.debug("set_verified: account %s unchanged", account_id)

    def insert_verification_secret(self, account_id: UUID, secret: str) -> None:
        sql = "INSERT INTO verification_secret (account_id, secret) VALUES (%s, %s)"

        with _translate_errors("insert_verification_secret"), self._conn.cursor() as cursor:
            cursor.execute(sql, (account_id, secret))

    def get_verification_secret(self, account_id: UUID) -> str | None:
        sql = "SELECT secret FROM verification_secret WHERE account_id = %s"

        with _translate_errors("get_verification_secret"), self._conn.cursor() as cursor:
            cursor.execute(sql, (account_id,))
            row = cursor.fetchone()
            return row[0] if row is not None else None


class PostgresAccountStore:
    """
    Implements AccountRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: ConnectionPool) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 ConnectionPool for database connections
        """
        self._pool = pool

    @contextmanager
    def transaction(self) -> Iterator[PostgresAccountSession]:
        """
        Borrow one connection and run the block as a single transaction.

        Raises:
            StoreUnavailable: Connection could not be borrowed or commit failed
        """
        try:
            with self._pool.connection() as conn:
                yield PostgresAccountSession(conn)
        except psycopg.Error as e:
            logger.error("Transaction failed: %s", type(e).__name__)
            raise StoreUnavailable("transaction failed") from e

    def exists_by_email(self, email: str) -> bool:
        with self.transaction() as session:
            return session.exists_by_email(email)

    def insert_account(self, email: str, password_hash: str) -> UUID:
        with self.transaction() as session:
            return session.insert_account(email, password_hash)

    def get_password_hash(self, email: str) -> str | None:
        with self.transaction() as session:
            return session.get_password_hash(email)

    def set_verified(self, account_id: UUID, verified: bool) -> None:
        with self.transaction() as session:
            session.set_verified(account_id, verified)

    def insert_verification_secret(self, account_id: UUID, secret: str) -> None:
        with self.transaction() as session:
            session.insert_verification_secret(account_id, secret)

    def get_verification_secret(self, account_id: UUID) -> str | None:
        with self.transaction() as session:
            return session.get_verification_secret(account_id)


def run_migrations(pool: ConnectionPool, migrations_dir: Traversable = MIGRATIONS_DIR) -> None:
    """
    Apply every *.sql file in migrations_dir, in filename order.

    Files must be idempotent (CREATE ... IF NOT EXISTS); they run on every
    startup. Each file is committed on its own.

    Raises:
        RuntimeError: A migration file failed to apply
    """
    sql_files = sorted(
        (entry for entry in migrations_dir.iterdir() if entry.name.endswith(".sql")),
        key=lambda entry: entry.name,
    )
    if not sql_files:
        logger.warning("No migrations found in %s", migrations_dir)
        return

    for sql_file in sql_files:
        try:
            with pool.connection() as conn:
                conn.execute(sql_file.read_text())
        except (OSError, psycopg.Error) as e:
            logger.error("Migration %s failed: %s", sql_file.name, e)
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
        logger.info("Applied migration %s", sql_file.name)
