from fastapi import APIRouter, Body, Depends, status
from pydantic import BaseModel, Field

from portfolio_api.auth import jwt_handler
from portfolio_api.auth.dependencies import get_auth_service, get_current_claims
from portfolio_api.models.user import User, UserResponse
from portfolio_api.services.auth_service import AuthService

router = APIRouter(tags=['auth'])


class RegisterRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class LoginRequest(BaseModel):
    email: str | None = None
    password: str | None = None


class InitAdminRequest(BaseModel):
    email: str | None = None
    password: str | None = None
    name: str | None = None


class UpdateProfileRequest(BaseModel):
    name: str | None = None
    email: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str | None = Field(default=None, alias='currentPassword')
    new_password: str | None = Field(default=None, alias='newPassword')

    class Config:
        populate_by_name = True


def public_user(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump()


def token_response(message: str, user: User) -> dict:
    return {
        'message': message,
        'token': jwt_handler.create_access_token(user),
        'user': public_user(user),
    }


@router.post('/register', status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user = service.register(data.email, data.password, data.name)
    return token_response('User registered successfully', user)


@router.post('/login')
def login(data: LoginRequest, service: AuthService = Depends(get_auth_service)):
    user = service.authenticate(data.email, data.password)
    return token_response('Login successful', user)


@router.get('/me', response_model=UserResponse)
def me(
    claims: dict = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    return public_user(service.get_self(claims))


@router.post('/verify')
def verify(claims: dict = Depends(get_current_claims)):
    return {'valid': True, 'user': claims}


@router.post('/init-admin', status_code=status.HTTP_201_CREATED)
def init_admin(
    data: InitAdminRequest | None = Body(default=None),
    service: AuthService = Depends(get_auth_service),
):
    data = data or InitAdminRequest()
    user, credentials = service.initialize_admin(data.email, data.password, data.name)
    response = token_response('Admin user initialized successfully', user)
    response['credentials'] = credentials
    return response


@router.put('/profile')
def update_profile(
    data: UpdateProfileRequest,
    claims: dict = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    user = service.update_profile(claims, name=data.name, email=data.email)
    return {'message': 'Profile updated successfully', 'user': public_user(user)}


@router.patch('/password')
def change_password(
    data: ChangePasswordRequest,
    claims: dict = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    service.change_own_password(claims, data.current_password, data.new_password)
    return {'message': 'Password updated successfully'}


@router.delete('/account')
def delete_account(
    claims: dict = Depends(get_current_claims),
    service: AuthService = Depends(get_auth_service),
):
    service.delete_account(claims)
    return {'message': 'Account deleted successfully'}
