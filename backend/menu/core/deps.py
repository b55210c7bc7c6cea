# backend/menu/core/deps.py
from fastapi import Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from menu.core.config import settings
from menu.core.cookies import delete_session_cookie, set_session_cookie
from menu.core.database import get_session
from menu.models.user import User
from menu.services.auth.service import AuthService
from menu.services.auth.sessions import SessionStore, SessionValidationResult
from menu.services.ingredients.openfoodfacts import IngredientAPI
from menu.services.ingredients.service import IngredientService
from menu.services.recipes.cache import RecipeGenerationCache
from menu.services.recipes.service import RecipeService

LOGIN_PATH = "/login"


def get_session_token(request: Request) -> str | None:
    return request.cookies.get(settings.session_cookie_name)


async def get_session_context(
    response: Response,
    session_token: str | None = Depends(get_session_token),
    db: AsyncSession = Depends(get_session),
) -> SessionValidationResult:
    """Validate the session cookie, refreshing it on success and clearing it otherwise."""
    if not session_token:
        return SessionValidationResult(session=None, user=None)

    result = await SessionStore(db).validate(session_token)
    if result.session:
        set_session_cookie(response, session_token, result.session.expires_at)
    else:
        delete_session_cookie(response)
    return result


async def get_current_user(
    context: SessionValidationResult = Depends(get_session_context),
) -> User | None:
    return context.user


async def require_user(
    user: User | None = Depends(get_current_user),
) -> User:
    """Send unauthenticated requests to the login page."""
    if not user:
        raise HTTPException(
            status_code=status.HTTP_302_FOUND,
            detail="Authentication required",
            headers={"Location": LOGIN_PATH},
        )
    return user


def get_auth_service(db: AsyncSession = Depends(get_session)) -> AuthService:
    return AuthService(db)


def get_ingredient_service(db: AsyncSession = Depends(get_session)) -> IngredientService:
    return IngredientService(db)


def get_recipe_service(db: AsyncSession = Depends(get_session)) -> RecipeService:
    return RecipeService(db)


def get_ingredient_api() -> IngredientAPI:
    return IngredientAPI()


def get_recipe_cache(request: Request) -> RecipeGenerationCache:
    """The process-wide cache built at startup (see ``menu.main.lifespan``)."""
    return request.app.state.recipe_cache
