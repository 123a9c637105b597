"""
Authentication endpoints for CharForge.

Register, login, logout and who-am-i. Registration and credential checks go
through the fastapi-users UserManager; tokens are issued by the same JWT
strategy the bearer backend validates with.
"""

from fastapi import APIRouter, Depends, Request, status
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import exceptions as fastapi_users_exceptions

from ..error_types import ErrorMessages
from ..exceptions import LoggedHTTPException
from ..models.user import User
from ..schemas.auth import (
    AuthResponse,
    CurrentUser,
    LoginRequest,
    MessageResponse,
    RegisterRequest,
    UserCreate,
)
from ..structured_logging.enhanced_logging_config import get_logger
from ..utils.error_logging import create_context_from_request
from .users import UserManager, get_current_active_user, get_jwt_strategy, get_user_manager

logger = get_logger(__name__)

auth_router = APIRouter(prefix="/auth", tags=["auth"])


def _current_user_view(user: User) -> CurrentUser:
    return CurrentUser(id=str(user.id), name=user.name, email=user.email)


async def _issue_token(user: User) -> AuthResponse:
    access_token = await get_jwt_strategy().write_token(user)
    return AuthResponse(access_token=access_token, user=_current_user_view(user))


@auth_router.post("/register", response_model=AuthResponse)
async def register_user(
    body: RegisterRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
) -> AuthResponse:
    """
    Register a new user and return an access token.

    A duplicate email is rejected with 400.
    """
    logger.info("Registration attempt")

    user_create = UserCreate(email=body.email, password=body.password, name=body.name)
    try:
        user = await user_manager.create(user_create, safe=True, request=request)
    except fastapi_users_exceptions.UserAlreadyExists as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "register_user"
        raise LoggedHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=ErrorMessages.EMAIL_ALREADY_REGISTERED,
            context=context,
        ) from e
    except fastapi_users_exceptions.InvalidPasswordException as e:
        context = create_context_from_request(request)
        context.metadata["operation"] = "register_user"
        raise LoggedHTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e.reason),
            context=context,
        ) from e

    logger.info("User registered successfully", user_id=str(user.id))
    return await _issue_token(user)


@auth_router.post("/login", response_model=AuthResponse)
async def login_user(
    body: LoginRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
) -> AuthResponse:
    """
    Authenticate a user by email and password and return an access token.

    Unknown email, wrong password and inactive accounts all answer 401 with
    the same message.
    """
    credentials = OAuth2PasswordRequestForm(username=body.email, password=body.password)
    user = await user_manager.authenticate(credentials)

    if user is None or not user.is_active:
        context = create_context_from_request(request)
        context.metadata["operation"] = "login_user"
        raise LoggedHTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ErrorMessages.INVALID_CREDENTIALS,
            context=context,
        )

    logger.info("Login successful", user_id=str(user.id))
    return await _issue_token(user)


@auth_router.post("/logout", response_model=MessageResponse)
async def logout_user(current_user: User = Depends(get_current_active_user)) -> MessageResponse:
    """
    End the caller's session.

    Bearer JWTs are stateless; the client discards its token.
    """
    logger.info("User logged out", user_id=str(current_user.id))
    return MessageResponse(message="Logged out")


@auth_router.get("/me", response_model=CurrentUser)
async def get_current_user_info(current_user: User = Depends(get_current_active_user)) -> CurrentUser:
    """Return the currently authenticated user."""
    return _current_user_view(current_user)
