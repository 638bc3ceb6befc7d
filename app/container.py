"""
Wiring of adapters, repositories and services for one gateway process.
"""

from dataclasses import dataclass
from typing import Optional
import logging

import httpx

from adapters import (
    AuthClient,
    BackendClientProvider,
    RetryPolicy,
    SessionStore,
    StorageClient,
    create_backend_client,
)
from repositories import (
    IngredientRepository,
    ProfileRepository,
    RecipeIngredientRepository,
    RecipeRepository,
    SavedRecipeRepository,
)
from services import (
    IngredientService,
    ProfileService,
    RecipeService,
    SavedRecipeService,
    SessionService,
)

logger = logging.getLogger("cooksmart.container")


@dataclass
class Services:
    provider: BackendClientProvider
    store: SessionStore
    auth: AuthClient
    storage: StorageClient
    recipes: RecipeService
    saved: SavedRecipeService
    ingredients: IngredientService
    profiles: ProfileService
    session: SessionService

    async def aclose(self) -> None:
        self.session.close()
        await self.provider.aclose()
        logger.info("Backend clients closed")


def build_services(
    settings, transport: Optional[httpx.AsyncBaseTransport] = None
) -> Services:
    """Build the object graph from settings.

    ``transport`` replaces the network for every backend client, which is how
    the tests plug in an in-memory backend.
    """
    policy = RetryPolicy.from_settings(settings)
    store = SessionStore(settings.session_file)
    provider = BackendClientProvider(
        lambda: create_backend_client(settings, store.access_token, transport)
    )

    auth = AuthClient(provider, store, policy)
    storage = StorageClient(provider, policy, settings.storage_cache_control)

    recipe_repo = RecipeRepository(provider, policy)
    ingredient_repo = IngredientRepository(provider, policy)
    profiles = ProfileService(
        ProfileRepository(provider, policy), storage, settings.avatar_bucket
    )

    return Services(
        provider=provider,
        store=store,
        auth=auth,
        storage=storage,
        recipes=RecipeService(
            recipe_repo,
            RecipeIngredientRepository(provider, policy),
            ingredient_repo,
            storage,
            image_bucket=settings.recipe_image_bucket,
            transactional_writes=settings.transactional_recipe_writes,
        ),
        saved=SavedRecipeService(SavedRecipeRepository(provider, policy)),
        ingredients=IngredientService(ingredient_repo),
        profiles=profiles,
        session=SessionService(
            auth,
            profiles,
            provider,
            check_interval=settings.session_check_interval_sec,
            probe_timeout=settings.probe_timeout_sec,
            oauth_provider=settings.oauth_provider,
            oauth_redirect_url=settings.oauth_redirect_url,
        ),
    )
