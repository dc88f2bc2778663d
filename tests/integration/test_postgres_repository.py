"""
Integration tests for PostgresAccountStore.

Tests repository operations against a real PostgreSQL database.
Skipped when DATABASE_URL is not reachable.
"""

from uuid import UUID, uuid4

import pytest
from psycopg_pool import ConnectionPool

from chat_auth.adapters.repository.postgres import PostgresAccountStore
from chat_auth.domain.exceptions import AccountAlreadyExists, StoreUnavailable

pytestmark = [pytest.mark.integration, pytest.mark.usefixtures("clean_database")]


@pytest.fixture
def repository(pool: ConnectionPool) -> PostgresAccountStore:
    """Create repository instance for each test."""
    return PostgresAccountStore(pool)


def is_verified(pool: ConnectionPool, account_id: UUID) -> bool:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute("SELECT verified FROM account WHERE id = %s", (account_id,))
        return cursor.fetchone()[0]


def count_rows(pool: ConnectionPool, table: str) -> int:
    with pool.connection() as conn, conn.cursor() as cursor:
        cursor.execute(f"SELECT COUNT(*) FROM {table}")
        return cursor.fetchone()[0]


class TestAccounts:
    """Tests for account operations."""

    def test_insert_account_returns_uuid(self, repository: PostgresAccountStore) -> None:
        """Inserted accounts get a generated UUID."""
        account_id = repository.insert_account("a@x.com", "$2b$04$hash")

        assert isinstance(account_id, UUID)

    def test_new_account_unverified(
        self, repository: PostgresAccountStore, pool: ConnectionPool
    ) -> None:
        """verified defaults to false."""
        account_id = repository.insert_account("a@x.com", "$2b$04$hash")

        assert is_verified(pool, account_id) is False

    def test_exists_by_email(self, repository: PostgresAccountStore) -> None:
        """exists_by_email reflects inserted accounts."""
        assert repository.exists_by_email("a@x.com") is False

        repository.insert_account("a@x.com", "$2b$04$hash")

        assert repository.exists_by_email("a@x.com") is True

    def test_email_match_is_exact(self, repository: PostgresAccountStore) -> None:
        """Emails are compared as stored, case included."""
        repository.insert_account("Alice@x.com", "$2b$04$hash")

        assert repository.exists_by_email("alice@x.com") is False

    def test_duplicate_email_raises_already_exists(
        self, repository: PostgresAccountStore
    ) -> None:
        """The unique constraint surfaces as AccountAlreadyExists."""
        repository.insert_account("a@x.com", "$2b$04$hash")

        with pytest.raises(AccountAlreadyExists):
            repository.insert_account("a@x.com", "$2b$04$other")

    def test_get_password_hash(self, repository: PostgresAccountStore) -> None:
        """Stored hash is returned; unknown email returns None."""
        repository.insert_account("a@x.com", "$2b$04$hash")

        assert repository.get_password_hash("a@x.com") == "$2b$04$hash"
        assert repository.get_password_hash("b@x.com") is None

    def test_set_verified_is_idempotent(
        self, repository: PostgresAccountStore, pool: ConnectionPool
    ) -> None:
        """Setting verified twice leaves it verified."""
        account_id = repository.insert_account("a@x.com", "$2b$04$hash")

        repository.set_verified(account_id, True)
        repository.set_verified(account_id, True)

        assert is_verified(pool, account_id) is True

    def test_set_verified_unknown_account_is_noop(
        self, repository: PostgresAccountStore
    ) -> None:
        """Updating an unknown id changes nothing and does not raise."""
        repository.set_verified(uuid4(), True)


class TestVerificationSecrets:
    """Tests for verification secret operations."""

    def test_round_trip(self, repository: PostgresAccountStore) -> None:
        """A stored secret is returned for its account."""
        account_id = repository.insert_account("a@x.com", "$2b$04$hash")

        repository.insert_verification_secret(account_id, "ab" * 32)

        assert repository.get_verification_secret(account_id) == "ab" * 32

    def test_unknown_account_has_no_secret(self, repository: PostgresAccountStore) -> None:
        """No secret row means None."""
        assert repository.get_verification_secret(uuid4()) is None

    def test_second_secret_for_account_rejected(
        self, repository: PostgresAccountStore
    ) -> None:
        """One secret per account; a second insert is a store failure."""
        account_id = repository.insert_account("a@x.com", "$2b$04$hash")
        repository.insert_verification_secret(account_id, "ab" * 32)

        with pytest.raises(StoreUnavailable):
            repository.insert_verification_secret(account_id, "cd" * 32)

    def test_secret_requires_existing_account(
        self, repository: PostgresAccountStore
    ) -> None:
        """Foreign key rejects secrets for missing accounts."""
        with pytest.raises(StoreUnavailable):
            repository.insert_verification_secret(uuid4(), "ab" * 32)


class TestTransactions:
    """Tests for units of work."""

    def test_commit_on_success(
        self, repository: PostgresAccountStore, pool: ConnectionPool
    ) -> None:
        """Writes inside transaction() are committed together."""
        with repository.transaction() as store:
            account_id = store.insert_account("a@x.com", "$2b$04$hash")
            store.insert_verification_secret(account_id, "ab" * 32)

        assert count_rows(pool, "account") == 1
        assert count_rows(pool, "verification_secret") == 1

    def test_rollback_on_error(
        self, repository: PostgresAccountStore, pool: ConnectionPool
    ) -> None:
        """An exception inside transaction() undoes earlier writes."""
        with pytest.raises(RuntimeError):
            with repository.transaction() as store:
                store.insert_account("a@x.com", "$2b$04$hash")
                raise RuntimeError("signing failed")

        assert count_rows(pool, "account") == 0
        assert repository.exists_by_email("a@x.com") is False
