"""
Authentication API endpoints.
"""
from fastapi import APIRouter, Depends, status

from ..dependencies import (
    CurrentPrincipal,
    RefreshCredentials,
    get_auth_service,
    get_current_principal,
    get_refresh_credentials,
    http_error,
)
from ..schemas.auth_schemas import (
    ChangePasswordRequest,
    ErrorResponse,
    MessageResponse,
    PrincipalResponse,
    SigninRequest,
    SignupRequest,
    TokenResponse,
)
from ...application.services.auth_service import (
    AuthService,
    SigninRequest as ServiceSigninRequest,
    SignupRequest as ServiceSignupRequest,
)

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post(
    "/signup",
    response_model=PrincipalResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        409: {"model": ErrorResponse, "description": "Email already registered"},
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
)
async def signup(
    request: SignupRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Register a new principal.

    Returns the created profile. Signing in is a separate step.
    """
    result = await auth_service.signup(ServiceSignupRequest(
        name=request.name,
        email=request.email,
        password=request.password,
        phone=request.phone,
    ))

    if not result.success:
        raise http_error(result.error)

    return PrincipalResponse.from_profile(result.profile)


@router.post(
    "/signin",
    response_model=TokenResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
)
async def signin(
    request: SigninRequest,
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Authenticate with email and password and return access/refresh tokens.

    Any earlier refresh token of this principal stops working.
    """
    result = await auth_service.signin(ServiceSigninRequest(
        email=request.email,
        password=request.password,
    ))

    if not result.success:
        raise http_error(result.error)

    return TokenResponse.from_pair(result.tokens)


@router.post(
    "/refresh",
    response_model=TokenResponse,
    responses={
        403: {"model": ErrorResponse, "description": "Refresh token rejected"},
        503: {"model": ErrorResponse, "description": "Store unavailable"},
    },
)
async def refresh(
    credentials: RefreshCredentials = Depends(get_refresh_credentials),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Exchange the refresh token in the Authorization header for a new pair.

    The presented refresh token is single use.
    """
    result = await auth_service.refresh(credentials.principal_id, credentials.refresh_token)

    if not result.success:
        raise http_error(result.error)

    return TokenResponse.from_pair(result.tokens)


@router.post(
    "/logout",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}},
)
async def logout(
    current: CurrentPrincipal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """End the current session."""
    result = await auth_service.logout(current.id)

    if not result.success:
        raise http_error(result.error)

    return MessageResponse(message=result.message)


@router.post(
    "/change-password",
    response_model=MessageResponse,
    responses={
        401: {"model": ErrorResponse, "description": "Current password is incorrect"},
    },
)
async def change_password(
    request: ChangePasswordRequest,
    current: CurrentPrincipal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """
    Change the current principal's password.

    The active session is revoked; sign in again with the new password.
    """
    result = await auth_service.change_password(
        current.id,
        request.current_password,
        request.new_password,
    )

    if not result.success:
        raise http_error(result.error)

    return MessageResponse(message=result.message)
