"""
Shared fixtures for adversarial tests.

Provides services wired to either the in-memory repository or PostgreSQL.
"""

import pytest
from psycopg_pool import ConnectionPool

from chat_auth.adapters.repository.postgres import PostgresAccountStore
from chat_auth.domain.activation import ActivationService
from chat_auth.domain.credentials import CredentialHasher
from chat_auth.domain.registration import RegistrationService
from chat_auth.domain.tokens import TokenIssuer

from tests.fakes import ACCESS_TOKEN_SECRET, InMemoryAccountRepository


@pytest.fixture
def postgres_repository(pool: ConnectionPool, clean_database: None) -> PostgresAccountStore:
    """PostgreSQL repository on an emptied database."""
    return PostgresAccountStore(pool)


@pytest.fixture
def registration(
    memory_repository: InMemoryAccountRepository,
    hasher: CredentialHasher,
    tokens: TokenIssuer,
) -> RegistrationService:
    return RegistrationService(
        repository=memory_repository,
        hasher=hasher,
        tokens=tokens,
        access_token_secret=ACCESS_TOKEN_SECRET,
    )


@pytest.fixture
def activation(
    memory_repository: InMemoryAccountRepository, tokens: TokenIssuer
) -> ActivationService:
    return ActivationService(repository=memory_repository, tokens=tokens)
