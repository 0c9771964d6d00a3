from dataclasses import dataclass, asdict
from typing import Any

from product_catalog.catalog_api.services.catalog_service import CatalogService
from product_catalog.config import SYNC_RESTORE_DELETED
from product_catalog.data.postgres.product_repository import ProductRepository
from product_catalog.sync.contentful_adapter import to_product_values
from product_catalog.sync.contentful_client import ContentfulClient
from product_catalog.utils.errors import ExternalSourceUnavailable, ValidationError
from product_catalog.utils.logger import get_current_logger


@dataclass
class SyncResult:
    inserted: int = 0
    updated: int = 0
    skipped: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {**asdict(self), "ok": self.ok}


class ProductSyncJob:
    """
    Pulls products from Contentful and upserts them one by one by external id.

    The lookup includes soft-deleted rows so a re-sync never inserts a duplicate.
    Matched deleted rows are updated but stay deleted unless ``restore_deleted``.
    """

    def __init__(
        self,
        repository: ProductRepository,
        client: ContentfulClient,
        catalog: CatalogService,
        *,
        restore_deleted: bool = SYNC_RESTORE_DELETED,
    ):
        self._repository = repository
        self._client = client
        self._catalog = catalog
        self._restore_deleted = restore_deleted

    async def sync_from_external_source(self) -> SyncResult:
        """
        Run one sync.

        A failed fetch does not raise: it is logged and reported through
        ``SyncResult.error``. Store failures while upserting propagate as
        ``StoreUnavailable`` after the catalog cache has been invalidated.
        """
        logger = get_current_logger()
        result = SyncResult()

        logger.info("Fetching products from Contentful...")
        try:
            items = await self._client.fetch_entries()
        except ExternalSourceUnavailable as e:
            logger.error(f"❌ Error fetching from Contentful: {e}")
            result.error = str(e)
            return result

        logger.info(f"📦 Received {len(items)} entries")
        try:
            for item in items:
                try:
                    external_id, values = to_product_values(item)
                except ValidationError as e:
                    logger.warning(f"Skipping entry: {e}")
                    result.skipped += 1
                    continue

                if await self._upsert(external_id, values):
                    result.inserted += 1
                else:
                    result.updated += 1
        finally:
            await self._catalog.invalidate_catalog_cache()

        logger.info(
            f"✅ Sync finished: {result.inserted} inserted, {result.updated} updated, "
            f"{result.skipped} skipped"
        )
        return result

    async def _upsert(self, external_id: str, values: dict[str, Any]) -> bool:
        """Update the product with this external id or insert it. Returns True on insert."""
        logger = get_current_logger()
        existing = await self._repository.find_by_external_id(external_id, with_deleted=True)
        if existing is None:
            await self._repository.insert_product(external_id, values)
            logger.debug(f"Inserted product {external_id}")
            return True

        restore = self._restore_deleted and existing.deleted_at is not None
        await self._repository.update_product(existing.id, values, restore=restore)
        logger.debug(
            f"Updated product {external_id} (id={existing.id}, deleted={existing.deleted_at is not None}, restored={restore})"
        )
        return False
