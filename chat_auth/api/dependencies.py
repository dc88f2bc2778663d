"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
Settings and the connection pool are created once during app lifespan
startup and read back from app.state.
"""

from datetime import timedelta

from fastapi import Depends, Request
from psycopg_pool import ConnectionPool

from chat_auth.adapters.repository.postgres import PostgresAccountStore
from chat_auth.config.settings import Settings
from chat_auth.domain.activation import ActivationService
from chat_auth.domain.credentials import CredentialHasher
from chat_auth.domain.ports import AccountRepository
from chat_auth.domain.registration import RegistrationService
from chat_auth.domain.tokens import TokenIssuer


def get_app_settings(request: Request) -> Settings:
    """Get the settings built at startup from app state."""
    return request.app.state.settings


def get_pool(request: Request) -> ConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> AccountRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresAccountStore(pool)


def get_token_issuer(settings: Settings = Depends(get_app_settings)) -> TokenIssuer:
    """Create token issuer from configured issuer and lifetime."""
    return TokenIssuer(
        issuer=settings.token_iss,
        lifetime=timedelta(seconds=settings.token_lifetime_seconds),
    )


def get_registration_service(
    settings: Settings = Depends(get_app_settings),
    repository: AccountRepository = Depends(get_repository),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> RegistrationService:
    """
    Create registration service with injected dependencies.

    Wires together the repository, hasher and token issuer for the domain service.
    """
    return RegistrationService(
        repository=repository,
        hasher=CredentialHasher(rounds=settings.bcrypt_cost),
        tokens=tokens,
        access_token_secret=settings.access_token_secret.get_secret_value(),
    )


def get_activation_service(
    repository: AccountRepository = Depends(get_repository),
    tokens: TokenIssuer = Depends(get_token_issuer),
) -> ActivationService:
    """Create activation service with injected dependencies."""
    return ActivationService(repository=repository, tokens=tokens)
