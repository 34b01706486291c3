"""Image replacement shared by users and products."""

from typing import BinaryIO, TypeVar

from storefront.repositories.base import Repository
from storefront.services.file_store import FileStore

EntityT = TypeVar("EntityT")


def replace_image(
    repo: Repository,
    files: FileStore,
    entity: EntityT,
    stream: BinaryIO,
    namespace: str,
    filename: str | None,
) -> EntityT:
    """
    Point entity.image_path at a newly stored file.

    Order: store the new file, commit the record, then delete the old file.
    If saving fails for any reason the new file is discarded and the old one is kept.
    """
    old_path = entity.image_path
    new_path = files.store(stream, namespace, filename)
    entity.image_path = new_path
    try:
        entity = repo.save(entity)
    except Exception:
        files.discard(new_path)
        raise
    if old_path and old_path != new_path:
        files.discard(old_path)
    return entity
