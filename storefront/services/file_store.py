"""Disk-backed store for uploaded images, grouped into namespaces (users, products)."""

import logging
import re
import uuid
from collections.abc import Iterable
from pathlib import Path, PurePosixPath
from typing import BinaryIO

from storefront.core.errors import StorageError, ValidationError

logger = logging.getLogger(__name__)

USERS_NAMESPACE = "users"
PRODUCTS_NAMESPACE = "products"

_NAMESPACE_RE = re.compile(r"^[a-z0-9_-]+$")
# Extensions are kept only when they look like a real suffix (".png", ".jpeg").
_EXTENSION_RE = re.compile(r"^\.[a-z0-9]{1,10}$")
_CHUNK_SIZE = 64 * 1024


def validate_content_type(declared: str | None, allowed: Iterable[str]) -> str:
    """
    Check a client-declared content type against an allow-list.

    Only the declared header is inspected; the bytes are not sniffed, so a
    client can still mislabel a file. Returns the normalized type.
    """
    normalized = (declared or "").split(";")[0].strip().lower()
    allowed_set = {a.strip().lower() for a in allowed}
    if not normalized or normalized not in allowed_set:
        raise ValidationError(
            f"Invalid file type: {normalized or 'unknown'}. "
            f"Allowed types: {', '.join(sorted(allowed_set))}"
        )
    return normalized


class FileStore:
    """
    Persist uploads under root/<namespace>/<uuid><ext> and hand back public paths.

    Public paths look like "/uploads/products/3f2c...e1.png" and mirror the
    on-disk layout under root, so the same tree can be served as static files.
    """

    def __init__(self, root: str | Path, url_prefix: str = "/uploads", max_bytes: int = 5 * 1024 * 1024) -> None:
        self.root = Path(root).resolve()
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_bytes

    def ensure_namespaces(self, *namespaces: str) -> None:
        """Create root and the given namespace directories if absent."""
        for namespace in namespaces:
            self._namespace_dir(namespace).mkdir(parents=True, exist_ok=True)

    def store(self, stream: BinaryIO, namespace: str, filename: str | None) -> str:
        """Write stream under namespace with a collision-free name; return its public path."""
        directory = self._namespace_dir(namespace)
        name = uuid.uuid4().hex + _extension(filename)
        target = directory / name
        written = 0
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with open(target, "wb") as out:
                while chunk := stream.read(_CHUNK_SIZE):
                    written += len(chunk)
                    if written > self.max_bytes:
                        break
                    out.write(chunk)
        except OSError as e:
            self._remove_quietly(target)
            logger.error("Failed to store upload", extra={"namespace": namespace, "reason": str(e)})
            raise StorageError("Failed to upload image") from e

        if written > self.max_bytes:
            self._remove_quietly(target)
            raise ValidationError(
                f"File size must not exceed {self.max_bytes // 1024} KB."
            )
        if written == 0:
            self._remove_quietly(target)
            raise ValidationError("Uploaded file is empty.")

        public_path = f"{self.url_prefix}/{namespace}/{name}"
        logger.info("Stored upload", extra={"path": public_path, "bytes": written})
        return public_path

    def resolve(self, public_path: str) -> Path:
        """Map a public path back to its location on disk. Raises ValueError outside the store."""
        prefix = self.url_prefix + "/"
        if not public_path.startswith(prefix):
            raise ValueError(f"path is not under {self.url_prefix}: {public_path!r}")
        relative = PurePosixPath(public_path[len(prefix):])
        candidate = (self.root / relative).resolve()
        if candidate == self.root or self.root not in candidate.parents:
            raise ValueError(f"path escapes the upload root: {public_path!r}")
        return candidate

    def delete(self, public_path: str | None) -> bool:
        """Remove the file behind public_path. Returns False when there was nothing to remove."""
        if not public_path:
            return False
        try:
            target = self.resolve(public_path)
        except ValueError:
            logger.warning("Refusing to delete path outside upload root", extra={"path": public_path})
            return False
        try:
            target.unlink()
        except FileNotFoundError:
            return False
        logger.info("Deleted upload", extra={"path": public_path})
        return True

    def discard(self, public_path: str | None) -> None:
        """Best-effort delete for cleanup paths: failures are logged, never raised."""
        try:
            self.delete(public_path)
        except OSError as e:
            logger.warning(
                "Failed to delete upload",
                extra={"path": public_path, "reason": str(e)},
            )

    def _namespace_dir(self, namespace: str) -> Path:
        if not _NAMESPACE_RE.match(namespace):
            raise ValueError(f"invalid upload namespace: {namespace!r}")
        return self.root / namespace

    @staticmethod
    def _remove_quietly(target: Path) -> None:
        try:
            target.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove partial upload", extra={"file": str(target)})


def _extension(filename: str | None) -> str:
    suffix = PurePosixPath(filename or "").suffix.lower()
    return suffix if _EXTENSION_RE.match(suffix) else ""
