"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- Test settings (fast bcrypt cost, fixed issuer and access secret)
- An in-memory AccountRepository for flows that need no database
- A PostgreSQL connection pool that skips when no database is reachable
"""

from collections.abc import Generator
from datetime import timedelta

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from chat_auth.adapters.repository.postgres import run_migrations
from chat_auth.config.settings import Settings
from chat_auth.domain.credentials import CredentialHasher
from chat_auth.domain.tokens import TokenIssuer

from tests.fakes import ACCESS_TOKEN_SECRET, TOKEN_ISS, InMemoryAccountRepository


@pytest.fixture(scope="session")
def settings() -> Settings:
    """Settings for tests; DATABASE_URL still comes from the environment."""
    return Settings(
        token_iss=TOKEN_ISS,
        access_token_secret=ACCESS_TOKEN_SECRET,
        bcrypt_cost=4,
    )


@pytest.fixture
def tokens() -> TokenIssuer:
    """Token issuer with the test issuer and a five minute lifetime."""
    return TokenIssuer(issuer=TOKEN_ISS, lifetime=timedelta(minutes=5))


@pytest.fixture
def hasher() -> CredentialHasher:
    """bcrypt hasher at the minimum cost factor, for speed."""
    return CredentialHasher(rounds=4)


@pytest.fixture
def memory_repository() -> InMemoryAccountRepository:
    """Fresh in-memory repository."""
    return InMemoryAccountRepository()


@pytest.fixture(scope="session")
def pool(settings: Settings) -> Generator[ConnectionPool, None, None]:
    """Connection pool against DATABASE_URL with migrations applied."""
    pool = ConnectionPool(
        conninfo=settings.database_url,
        min_size=1,
        max_size=10,
        timeout=5,
        open=True,
    )
    try:
        pool.wait(timeout=3)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL is not available")

    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def clean_database(pool: ConnectionPool) -> Generator[None, None, None]:
    """Empty both tables before a test."""
    with pool.connection() as conn:
        conn.execute("DELETE FROM verification_secret")
        conn.execute("DELETE FROM account")
        conn.commit()
    yield
