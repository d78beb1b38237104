"""
Profile API endpoints for the authenticated principal.
"""
from fastapi import APIRouter, Depends

from ..dependencies import CurrentPrincipal, get_auth_service, get_current_principal, http_error
from ..schemas.auth_schemas import ErrorResponse, MessageResponse, PrincipalResponse
from ..schemas.principal_schemas import ProfileUpdateRequest
from ...application.services.auth_service import AuthService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get(
    "/me",
    response_model=PrincipalResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def get_profile(
    current: CurrentPrincipal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Get the current principal's profile."""
    result = await auth_service.get_profile(current.id)

    if not result.success:
        raise http_error(result.error)

    return PrincipalResponse.from_profile(result.profile)


@router.patch(
    "/me",
    response_model=PrincipalResponse,
    responses={
        401: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def update_profile(
    request: ProfileUpdateRequest,
    current: CurrentPrincipal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Update name, email or phone."""
    result = await auth_service.update_profile(current.id, request.to_update())

    if not result.success:
        raise http_error(result.error)

    return PrincipalResponse.from_profile(result.profile)


@router.delete(
    "/me",
    response_model=MessageResponse,
    responses={401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
async def delete_principal(
    current: CurrentPrincipal = Depends(get_current_principal),
    auth_service: AuthService = Depends(get_auth_service),
):
    """Delete the current principal permanently."""
    result = await auth_service.delete_principal(current.id)

    if not result.success:
        raise http_error(result.error)

    return MessageResponse(message=result.message)
