import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from menu.core.config import settings
from menu.core.database import async_session_factory, engine, init_db
from menu.core.deps import require_user
from menu.api.auth import router as auth_router
from menu.api.ingredients import router as ingredients_router
from menu.api.recipes import router as recipes_router
from menu.models.user import User
from menu.schemas.auth import UserResponse
from menu.services.recipes.cache import RecipeGenerationCache
from menu.services.recipes.generator import RecipeGenerator

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.auto_create_tables:
        await init_db()
    app.state.recipe_cache = RecipeGenerationCache(async_session_factory, RecipeGenerator())
    yield
    # Shutdown - let in-flight cache writes finish
    await app.state.recipe_cache.drain()
    await engine.dispose()
    logger.info("Shutdown complete")


app = FastAPI(
    title=settings.app_name,
    description="Pantry tracking and vegan recipe generation",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(ingredients_router)
app.include_router(recipes_router)


@app.get("/")
async def home(user: User = Depends(require_user)) -> dict[str, Any]:
    return {"user": UserResponse.model_validate(user)}


@app.get("/health")
async def health_check() -> dict[str, Any]:
    return {
        "status": "healthy",
        "version": "0.1.0",
        "environment": settings.environment,
    }
