"""
API v1 routes.

Defines the user registration and activation endpoints:
- POST /api/v1/user/register - Create an account, issue access and verification tokens
- GET  /api/v1/user/activate - Mark the account verified using its verification token

Routes are plain functions: the services block on bcrypt and the database,
so FastAPI runs them in its threadpool.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from chat_auth.api.dependencies import (
    get_activation_service,
    get_app_settings,
    get_registration_service,
)
from chat_auth.api.models import (
    ActivateResult,
    ErrorResponse,
    RegisterRequest,
    RegisterResult,
    SuccessResponse,
)
from chat_auth.config.settings import Settings
from chat_auth.domain.activation import ActivationService
from chat_auth.domain.exceptions import AccountAlreadyExists, AuthError, InvalidToken
from chat_auth.domain.registration import RegistrationService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/user", tags=["user"])

ACCESS_TOKEN_COOKIE = "token"

USER_EXISTS_MESSAGE = "User already exists."
REGISTER_FAILED_MESSAGE = "Internal server error. Please try to register again."
INVALID_TOKEN_MESSAGE = "Invalid verification token."
ACTIVATE_FAILED_MESSAGE = "Internal server error."


@router.post(
    "/register",
    response_model=SuccessResponse[RegisterResult],
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Register a new user",
    description="Create an unverified account. The access token is set as the "
    "`token` cookie; the verification token is returned in the body.",
)
def register(
    request_data: RegisterRequest,
    response: Response,
    service: RegistrationService = Depends(get_registration_service),
    settings: Settings = Depends(get_app_settings),
) -> SuccessResponse[RegisterResult]:
    """
    Register a new user.

    - **email**: Valid email address to register
    - **password**: Password
    """
    logger.info("Received registration request")
    try:
        result = service.register(request_data.email, request_data.password)
    except AccountAlreadyExists:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=USER_EXISTS_MESSAGE,
        ) from None
    except AuthError as e:
        logger.error("Registration failed: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=REGISTER_FAILED_MESSAGE,
        ) from None

    # Must also be sent over plain HTTP, so not Secure
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=result.access_token,
        max_age=settings.token_lifetime_seconds,
        path="/",
        secure=False,
        httponly=True,
        samesite="lax",
    )

    # The verification token belongs in an emailed link; returned here for development
    return SuccessResponse[RegisterResult](
        result=RegisterResult(
            message="User registration complete.",
            verification_token=result.verification_token,
        )
    )


@router.get(
    "/activate",
    response_model=SuccessResponse[ActivateResult],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid verification token"},
        422: {"model": ErrorResponse, "description": "Validation error"},
        500: {"model": ErrorResponse, "description": "Internal error"},
    },
    summary="Activate account with verification token",
    description="Verify the token issued at registration and mark the account verified.",
)
def activate(
    token: str = Query(..., description="Verification token from registration"),
    service: ActivationService = Depends(get_activation_service),
) -> SuccessResponse[ActivateResult]:
    """
    Activate account with verification token.

    All token failures return the same generic error so callers cannot
    tell forged, expired and unknown-account tokens apart.
    """
    logger.info("Received activation request")
    try:
        service.activate(token)
    except InvalidToken:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_TOKEN_MESSAGE,
        ) from None
    except AuthError as e:
        logger.error("Activation failed: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=ACTIVATE_FAILED_MESSAGE,
        ) from None

    return SuccessResponse[ActivateResult](result=ActivateResult(message="User activated."))
