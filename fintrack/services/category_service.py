"""Category Service."""

from __future__ import annotations

from fintrack.auth import SessionManager
from fintrack.cache import (
    CacheStore,
    EntityKind,
    InvalidationRouter,
    RefreshPolicy,
    build_cache_key,
)
from fintrack.logger import StructuredLogger
from fintrack.models.category import Category, CategoryCreate, CategoryUpdate
from fintrack.models.enums import CategoryType
from fintrack.models.service_models import ServiceResult
from fintrack.repositories.category_repository import CategoryRepository
from fintrack.services.base_service import CachedEntityService


class CategoryService(CachedEntityService[Category]):
    """Cache-aside access to income / expense categories."""

    ENTITY = EntityKind.CATEGORIES
    WRITE_POLICIES = {
        "create_category": RefreshPolicy.INVALIDATE_ONLY,
        "update_category": RefreshPolicy.INVALIDATE_ONLY,
        "delete_category": RefreshPolicy.INVALIDATE_ONLY,
    }

    def __init__(
        self,
        repo: CategoryRepository,
        cache: CacheStore,
        router: InvalidationRouter,
        session: SessionManager,
        logger: StructuredLogger,
    ) -> None:
        super().__init__(cache, router, session, logger)
        self._repo = repo

    @property
    def categories(self) -> list[Category]:
        return self.items

    @property
    def income_categories(self) -> list[Category]:
        return [c for c in self.items if c.type == CategoryType.INCOME]

    @property
    def expense_categories(self) -> list[Category]:
        return [c for c in self.items if c.type == CategoryType.EXPENSE]

    @property
    def categories_tree(self) -> list[Category]:
        """Top-level categories, each carrying its direct children.

        Returns copies; the local list is not modified.
        """
        children: dict[str, list[Category]] = {}
        for category in self.items:
            if category.parent_id:
                children.setdefault(category.parent_id, []).append(category)
        return [
            category.model_copy(update={"children": children.get(category.id, [])})
            for category in self.items
            if not category.parent_id
        ]

    async def fetch_categories(
        self, force_refresh: bool = False,
    ) -> ServiceResult[tuple[Category, ...]]:
        async def _load(user_id: str) -> tuple[Category, ...]:
            return tuple(await self._repo.list_for_user(user_id))

        result = await self._cached_read(
            build_cache_key(self.ENTITY),
            _load,
            force_refresh=force_refresh,
            expected_type=tuple,
            failure_message="Failed to fetch categories",
        )
        if result.success and result.data is not None:
            self._set_items(result.data)
        return result

    async def create_category(self, data: CategoryCreate) -> ServiceResult[Category]:
        return await self._mutate(
            "create_category",
            lambda user_id: self._repo.create(user_id, data),
            failure_message="Failed to create category",
            patch=self._patch_append,
        )

    async def update_category(
        self, category_id: str, updates: CategoryUpdate,
    ) -> ServiceResult[Category]:
        return await self._mutate(
            "update_category",
            lambda user_id: self._repo.update(category_id, user_id, updates),
            failure_message="Failed to update category",
            entity_id=category_id,
            patch=self._patch_replace,
        )

    async def delete_category(self, category_id: str) -> ServiceResult[None]:
        return await self._mutate(
            "delete_category",
            lambda user_id: self._repo.deactivate(category_id, user_id),
            failure_message="Failed to delete category",
            entity_id=category_id,
            patch=lambda _: self._patch_remove(category_id),
        )
