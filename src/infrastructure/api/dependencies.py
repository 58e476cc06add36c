from __future__ import annotations

from typing import Annotated

from fastapi import Depends

from src.domain.config import ResponsiveConfig
from src.domain.services.context import ResponsiveContext
from src.infrastructure.cache.memory_cache import get_placeholder_cache
from src.infrastructure.config.settings import get_settings
from src.infrastructure.database.repositories.asset_repository import AssetRepository
from src.infrastructure.database.supabase_client import get_supabase_client
from src.infrastructure.storage.supabase_storage import SupabaseStorage
from src.infrastructure.transform.glide_transformer import GlideTransformer


def get_config() -> ResponsiveConfig:
    return get_settings().to_config()


def get_storage() -> SupabaseStorage:
    client = get_supabase_client()
    return SupabaseStorage(client)


def get_asset_repo() -> AssetRepository:
    return AssetRepository(get_supabase_client())


def get_transformer(
    storage: Annotated[SupabaseStorage, Depends(get_storage)],
    config: Annotated[ResponsiveConfig, Depends(get_config)],
) -> GlideTransformer:
    return GlideTransformer(storage, config)


def get_responsive_context(
    config: Annotated[ResponsiveConfig, Depends(get_config)],
    transformer: Annotated[GlideTransformer, Depends(get_transformer)],
) -> ResponsiveContext:
    return ResponsiveContext(
        config=config,
        transformer=transformer,
        placeholder_cache=get_placeholder_cache(),
    )
