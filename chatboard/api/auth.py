"""
Account endpoints: registration and login.

Both return a fresh opaque token that the client presents in the realtime
``authenticate`` event. Failures are rendered by the registered error handlers.
"""

from fastapi import APIRouter, status

from ..auth.accounts import AccountService
from ..dependencies import AccountServiceDep
from ..schemas.auth import AuthResponse, CredentialsRequest, ErrorResponse
from ..structured_logging.enhanced_logging_config import get_logger

logger = get_logger(__name__)

auth_router = APIRouter(prefix="/api", tags=["auth"])


@auth_router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_200_OK,
    responses={400: {"model": ErrorResponse}, 409: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def register(body: CredentialsRequest, accounts: AccountService = AccountServiceDep) -> AuthResponse:
    """Create an account and return its first token."""
    result = await accounts.register(body.username, body.password)
    return AuthResponse(token=result.token, username=result.username)


@auth_router.post(
    "/login",
    response_model=AuthResponse,
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def login(body: CredentialsRequest, accounts: AccountService = AccountServiceDep) -> AuthResponse:
    """Verify credentials and return a rotated token."""
    result = await accounts.login(body.username, body.password)
    return AuthResponse(token=result.token, username=result.username)
