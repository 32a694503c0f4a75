from fastapi import APIRouter, Body, Depends, Request, Response, status

from academy.core.deps import AuthorizationService
from academy.schemas.auth.user import LoginUser, RegisterUser, UserOut
from academy.services.shares.auth import AuthService
from academy.services.shares.recaptcha import RecaptchaService

router = APIRouter(prefix="/auth", tags=["Auth"])


def get_auth_service(auth: AuthService = Depends(AuthService)) -> AuthService:
    return auth


def get_authorization_service(
    authorization_service: AuthorizationService = Depends(AuthorizationService),
) -> AuthorizationService:
    return authorization_service


@router.post("/login", status_code=200)
async def login(
    res: Response,
    schema: LoginUser = Body(),
    auth_service: AuthService = Depends(get_auth_service),
):
    return await auth_service.login_async(schema, res)


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    request: Request,
    schema: RegisterUser = Body(),
    auth_service: AuthService = Depends(get_auth_service),
):
    recaptcha = RecaptchaService(request.app.state.http)
    return await auth_service.register_async(schema, recaptcha)


@router.post("/logout", status_code=status.HTTP_200_OK)
async def logout(
    res: Response,
    auth_service: AuthService = Depends(get_auth_service),
):
    return await auth_service.logout_async(res)


@router.get("/me", response_model=UserOut)
async def me(
    authorization: AuthorizationService = Depends(get_authorization_service),
):
    return await authorization.get_current_user(allow_suspended=True)
