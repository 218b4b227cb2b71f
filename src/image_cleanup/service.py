"""Service: deletes images a record stops referencing (on update) or owns (on delete)."""

from typing import Dict, Iterable, Optional

from aws_lambda_powertools import Logger
from image_cleanup.paths import diff, resolve_all
from image_cleanup.registry import DEFAULT_REGISTRY, ImagePathRegistry
from shared.storage import DeletionResult, ImageStorageGateway

logger = Logger(service="image-cleanup")


class ImageCleanupService:
    """
    Best-effort image cleanup driven by the path registry.

    A failed deletion is logged and never interrupts the remaining deletions
    or the caller's write.
    """

    def __init__(
        self,
        registry: Optional[ImagePathRegistry] = None,
        gateway: Optional[ImageStorageGateway] = None,
    ) -> None:
        self.registry = registry or DEFAULT_REGISTRY
        self._gateway = gateway

    @property
    def gateway(self) -> ImageStorageGateway:
        if self._gateway is None:
            self._gateway = ImageStorageGateway()
        return self._gateway

    def collect_images(self, record: Optional[dict], record_type: str) -> list:
        """Every image reference reachable through the registered paths."""
        if not record:
            return []
        if record_type not in self.registry:
            logger.debug("No image paths registered", extra={"record_type": record_type})
            return []
        references = []
        for path in self.registry.paths_for(record_type):
            references.extend(resolve_all(record, path))
        return list(dict.fromkeys(references))

    def cleanup_all(self, record: Optional[dict], record_type: str) -> Dict[str, DeletionResult]:
        """Deletes every image of `record`. Call right before deleting the record."""
        references = self.collect_images(record, record_type)
        logger.info(
            "Starting full image cleanup",
            extra={"record_type": record_type, "images": len(references)},
        )
        return self._delete_all(references, record_type)

    def cleanup_changed(
        self,
        old_record: Optional[dict],
        new_record: Optional[dict],
        record_type: str,
    ) -> Dict[str, DeletionResult]:
        """
        Deletes images present in the stored record but replaced or removed in
        the incoming one. Call right before persisting the update.

        References still reachable anywhere in `new_record` are kept, so an
        image moved between fields or positions is not deleted.
        """
        if not old_record or record_type not in self.registry:
            return {}
        changed = []
        for path in self.registry.paths_for(record_type):
            changed.extend(diff(old_record, new_record, path))

        still_referenced = set(self.collect_images(new_record, record_type))
        stale = [ref for ref in dict.fromkeys(changed) if ref not in still_referenced]
        logger.info(
            "Starting differential image cleanup",
            extra={"record_type": record_type, "images": len(stale)},
        )
        return self._delete_all(stale, record_type)

    def _delete_all(self, references: Iterable[str], record_type: str) -> Dict[str, DeletionResult]:
        results: Dict[str, DeletionResult] = {}
        for reference in references:
            try:
                result = self.gateway.delete(reference)
            except Exception as e:
                logger.warning(
                    f"Image deletion failed: {e}",
                    extra={"record_type": record_type, "reference": reference},
                )
                result = DeletionResult.ERROR
            results[reference] = result
        failed = [ref for ref, result in results.items() if result is DeletionResult.ERROR]
        if failed:
            logger.warning(
                "Some images could not be deleted",
                extra={"record_type": record_type, "failed": failed},
            )
        return results
