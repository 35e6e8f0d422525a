# FILE: app/sites/service.py
"""
Site Store Service

Manages deployed static sites on the local filesystem:

    <root>/<path>/index.html     content
    <root>/<path>/config.json    metadata sidecar (optional)

- Path-addressed containers with a fixed grammar (see validate_site_path)
- Create-exclusive deploys: the container directory is created with
  mkdir(exist_ok=False), so two deploys to one path yield one winner
- Content is written before the sidecar; a container without sidecar is
  still listed with default metadata (name = path, description = "")
- created_at is fixed at creation; updated_at moves on every mutation

Errors are surfaced, never masked: InvalidPathError, PathAlreadyExistsError,
SiteNotFoundError, PayloadTooLargeError and plain OSError for I/O failures.
"""
from __future__ import annotations

import json
import logging
import re
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional
from uuid import uuid4

from pydantic import ValidationError

from app.exceptions import BadRequestError
from app.sites.schemas import SiteFile, SiteMetadata, SiteRecord

logger = logging.getLogger(__name__)

CONTENT_FILE = "index.html"
METADATA_FILE = "config.json"

PATH_MIN_LENGTH = 1
PATH_MAX_LENGTH = 100
INVALID_PATH_CHARS = re.compile(r'[<>:"|?*]')
ALLOWED_PATH_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

DEFAULT_MAX_HTML_BYTES = 10 * 1024 * 1024
DEFAULT_GENERATOR = "qwen3-coder-plus"
_GENERATE_ATTEMPTS = 5


# =============================================================================
# EXCEPTIONS
# =============================================================================

class SiteStoreError(Exception):
    """Base exception for site store operations."""
    pass


class InvalidPathError(SiteStoreError):
    """Path fails length, character or grammar rules."""
    pass


class PathAlreadyExistsError(SiteStoreError):
    """A container already exists at the requested path."""
    pass


class SiteNotFoundError(SiteStoreError):
    """No container exists at the requested path."""
    pass


class PayloadTooLargeError(SiteStoreError):
    """HTML payload exceeds the configured size limit."""
    pass


# =============================================================================
# PATH VALIDATION
# =============================================================================

def validate_site_path(path: Optional[str]) -> str:
    """Return path unchanged if valid, else raise InvalidPathError."""
    if not isinstance(path, str):
        raise InvalidPathError("Path must be a string")
    if not PATH_MIN_LENGTH <= len(path) <= PATH_MAX_LENGTH:
        raise InvalidPathError(
            f"Invalid path. Length must be between {PATH_MIN_LENGTH} and {PATH_MAX_LENGTH} characters."
        )
    if INVALID_PATH_CHARS.search(path):
        raise InvalidPathError("Invalid path. Path contains illegal characters.")
    if not ALLOWED_PATH_PATTERN.fullmatch(path):
        raise InvalidPathError(
            "Invalid path. Only letters, digits, underscores and hyphens are allowed."
        )
    return path


def is_valid_site_path(path: Optional[str]) -> bool:
    try:
        validate_site_path(path)
    except InvalidPathError:
        return False
    return True


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _from_timestamp(ts: float) -> datetime:
    return datetime.fromtimestamp(ts, tz=timezone.utc)


# =============================================================================
# SITE STORE
# =============================================================================

class SiteStore:
    """
    Filesystem-backed store of deployed sites.

    clock is injectable so tests can control created_at / updated_at.
    """

    def __init__(
        self,
        root: Path,
        *,
        max_html_bytes: int = DEFAULT_MAX_HTML_BYTES,
        default_generator: str = DEFAULT_GENERATOR,
        url_prefix: str = "/websites",
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.root = Path(root)
        self.max_html_bytes = max_html_bytes
        self.default_generator = default_generator
        self.url_prefix = url_prefix.rstrip("/")
        self._clock = clock or _utcnow

    def site_url(self, path: str) -> str:
        return f"{self.url_prefix}/{path}/"

    def _container(self, path: str) -> Path:
        return self.root / validate_site_path(path)

    def _existing_container(self, path: str) -> Path:
        container = self._container(path)
        if not container.is_dir():
            raise SiteNotFoundError(f"Website not found: {path}")
        return container

    def _check_html(self, html: Optional[str]) -> str:
        if not html:
            raise BadRequestError("HTML content is required")
        size = len(html.encode("utf-8"))
        if size > self.max_html_bytes:
            raise PayloadTooLargeError(
                f"HTML content is {size} bytes; limit is {self.max_html_bytes} bytes"
            )
        return html

    # -------------------------------------------------------------------------
    # sidecar helpers
    # -------------------------------------------------------------------------

    def _read_metadata(self, container: Path) -> Optional[SiteMetadata]:
        meta_path = container / METADATA_FILE
        if not meta_path.is_file():
            return None
        try:
            data = json.loads(meta_path.read_text(encoding="utf-8"))
            return SiteMetadata.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning("[sites] Ignoring unreadable sidecar %s: %s", meta_path, e)
            return None

    def _write_metadata(self, container: Path, meta: SiteMetadata) -> None:
        (container / METADATA_FILE).write_text(meta.to_json(), encoding="utf-8")

    def _default_metadata(self, path: str, container: Path) -> SiteMetadata:
        stat = container.stat()
        created_ts = getattr(stat, "st_birthtime", None) or stat.st_ctime
        created = _from_timestamp(created_ts)
        return SiteMetadata(
            id=path,
            name=path,
            description="",
            created_at=created,
            updated_at=_from_timestamp(stat.st_mtime),
            generator="",
        )

    def _build_record(self, path: str, container: Path) -> SiteRecord:
        meta = self._read_metadata(container) or self._default_metadata(path, container)
        content = container / CONTENT_FILE
        file_size = content.stat().st_size if content.is_file() else 0
        return SiteRecord(
            id=path,
            name=meta.name,
            description=meta.description,
            created_at=meta.created_at,
            updated_at=meta.updated_at,
            generator=meta.generator,
            file_size=file_size,
            url=self.site_url(path),
        )

    # -------------------------------------------------------------------------
    # operations
    # -------------------------------------------------------------------------

    def _create_container(self, path: Optional[str]) -> tuple[str, Path]:
        self.root.mkdir(parents=True, exist_ok=True)

        if path is not None:
            container = self._container(path)
            try:
                container.mkdir()
            except FileExistsError:
                raise PathAlreadyExistsError(
                    "Path already exists. Please choose another path."
                ) from None
            return path, container

        for _ in range(_GENERATE_ATTEMPTS):
            candidate = uuid4().hex
            container = self.root / candidate
            try:
                container.mkdir()
            except FileExistsError:
                logger.warning("[sites] Generated path collision: %s", candidate)
                continue
            return candidate, container
        raise SiteStoreError("Could not allocate a unique site path")

    def deploy(
        self,
        html: str,
        path: Optional[str] = None,
        name: Optional[str] = None,
        description: Optional[str] = None,
        generator: Optional[str] = None,
    ) -> SiteRecord:
        """
        Create a new site container.

        Raises:
            InvalidPathError: caller-supplied path fails validation
            PathAlreadyExistsError: caller-supplied path is taken
            PayloadTooLargeError: html exceeds max_html_bytes
            BadRequestError: html is empty
        """
        html = self._check_html(html)
        if path == "":
            path = None
        if path is not None:
            validate_site_path(path)

        site_path, container = self._create_container(path)

        try:
            (container / CONTENT_FILE).write_text(html, encoding="utf-8")
        except OSError:
            shutil.rmtree(container, ignore_errors=True)
            raise

        now = self._clock()
        meta = SiteMetadata(
            id=site_path,
            name=(name or "").strip() or site_path,
            description=description or "",
            created_at=now,
            updated_at=now,
            generator=generator or self.default_generator,
        )
        self._write_metadata(container, meta)

        logger.info("[sites] Deployed %s (%d bytes)", site_path, len(html.encode("utf-8")))
        return self._build_record(site_path, container)

    def update_content(self, path: str, html: str) -> SiteRecord:
        """Overwrite index.html; bump updatedAt only when a sidecar exists."""
        container = self._existing_container(path)
        html = self._check_html(html)

        (container / CONTENT_FILE).write_text(html, encoding="utf-8")

        meta = self._read_metadata(container)
        if meta is not None:
            self._write_metadata(container, meta.model_copy(update={"updated_at": self._clock()}))

        logger.info("[sites] Updated content of %s", path)
        return self._build_record(path, container)

    def update_metadata(
        self,
        path: str,
        name: Optional[str] = None,
        description: Optional[str] = None,
    ) -> SiteRecord:
        """Partial metadata patch; a missing sidecar is created from defaults."""
        container = self._existing_container(path)
        meta = self._read_metadata(container) or self._default_metadata(path, container)

        patch: dict = {"updated_at": self._clock()}
        if name is not None:
            if not name.strip():
                raise BadRequestError("name must not be blank")
            patch["name"] = name.strip()
        if description is not None:
            patch["description"] = description

        self._write_metadata(container, meta.model_copy(update=patch))

        logger.info("[sites] Updated metadata of %s: %s", path, sorted(k for k in patch if k != "updated_at"))
        return self._build_record(path, container)

    def get(self, path: str) -> Optional[SiteRecord]:
        """Reconstruct a record, or None when the path is invalid or absent."""
        if not is_valid_site_path(path):
            return None
        container = self.root / path
        if not container.is_dir():
            return None
        try:
            return self._build_record(path, container)
        except OSError as e:
            logger.warning("[sites] Could not read %s: %s", path, e)
            return None

    def list_sites(self) -> List[SiteRecord]:
        """All sites, newest created_at first."""
        if not self.root.is_dir():
            return []

        records: List[SiteRecord] = []
        for entry in self.root.iterdir():
            if not entry.is_dir():
                continue
            record = self.get(entry.name)
            if record is not None:
                records.append(record)

        records.sort(key=lambda r: r.created_at, reverse=True)
        return records

    def delete(self, path: str) -> None:
        container = self._existing_container(path)
        shutil.rmtree(container)
        logger.info("[sites] Deleted %s", path)

    def list_files(self, path: str) -> List[SiteFile]:
        """Direct children of a site container (not recursive)."""
        container = self._existing_container(path)
        files: List[SiteFile] = []
        for entry in sorted(container.iterdir(), key=lambda p: p.name):
            stat = entry.stat()
            files.append(
                SiteFile(
                    name=entry.name,
                    type="directory" if entry.is_dir() else "file",
                    size=stat.st_size,
                    modified_at=_from_timestamp(stat.st_mtime),
                )
            )
        return files


__all__ = [
    "SiteStoreError",
    "InvalidPathError",
    "PathAlreadyExistsError",
    "SiteNotFoundError",
    "PayloadTooLargeError",
    "SiteStore",
    "validate_site_path",
    "is_valid_site_path",
    "CONTENT_FILE",
    "METADATA_FILE",
    "PATH_MAX_LENGTH",
]
