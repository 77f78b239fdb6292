"""Load the reference documents from local files or object storage.

The four documents (``product.txt``, ``contact.txt``, ``privacy.txt`` and
``detail.txt``) give the assistant its catalog, company details, contact
info and privacy policy. In development they are read from a local
directory; otherwise, or when any local file is missing, they are downloaded
from the storage bucket.
"""
import asyncio
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx

from src.analytics.logger import logger
from src.context.context_cache import ContextDocuments
from src.utils.config import settings
from src.utils.retry import http_retry

CONTEXT_FILES = ("product.txt", "contact.txt", "privacy.txt", "detail.txt")

# Older buckets were uploaded with a capitalized contact file
ALTERNATE_FILE_NAMES = {"contact.txt": "Contact.txt"}


def _document_key(file_name: str) -> str:
    return file_name[: -len(".txt")] if file_name.endswith(".txt") else file_name


class ContextFileLoader:
    """Load context documents from a local directory or a storage bucket."""

    def __init__(
        self,
        files_dir: Optional[str] = None,
        source: Optional[str] = None,
        storage_url: Optional[str] = None,
        storage_key: Optional[str] = None,
        bucket: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.files_dir = Path(files_dir or settings.context_files_dir)
        self.source = (source or settings.context_source).lower()
        self.storage_url = (storage_url or settings.storage_url or "").rstrip("/")
        self.storage_key = storage_key or settings.storage_key
        self.bucket = bucket or settings.storage_bucket
        self._http_client = http_client

    @property
    def use_local(self) -> bool:
        if self.source == "local":
            return True
        return self.source == "auto" and settings.is_development

    @property
    def storage_configured(self) -> bool:
        return bool(self.storage_url and self.storage_key)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.storage_key}",
            "apikey": self.storage_key or "",
        }

    def _object_url(self, file_name: str) -> str:
        return f"{self.storage_url}/storage/v1/object/{self.bucket}/{file_name}"

    def _client(self) -> httpx.AsyncClient:
        return self._http_client or httpx.AsyncClient(timeout=settings.context_load_timeout)

    async def __call__(self) -> Optional[ContextDocuments]:
        return await self.load()

    def load_local_files(self) -> Dict[str, str]:
        """Read whichever context files exist in the local directory."""
        documents: Dict[str, str] = {}
        for file_name in CONTEXT_FILES:
            file_path = self.files_dir / file_name
            try:
                documents[_document_key(file_name)] = file_path.read_text(encoding="utf-8")
                logger.info(f"Loaded {file_name} from local filesystem")
            except FileNotFoundError:
                logger.warning(f"Local file {file_name} not found at {file_path}")
            except OSError as e:
                logger.error(f"Error reading local file {file_name}: {e}")
        return documents

    @http_retry
    async def _download(self, client: httpx.AsyncClient, file_name: str) -> str:
        response = await client.get(self._object_url(file_name), headers=self._headers())
        response.raise_for_status()
        return response.text

    async def _download_with_alternate(
        self, client: httpx.AsyncClient, file_name: str
    ) -> Optional[str]:
        try:
            return await self._download(client, file_name)
        except httpx.HTTPError as e:
            alternate = ALTERNATE_FILE_NAMES.get(file_name)
            if alternate is None:
                logger.error(f"Error downloading {file_name}: {e}")
                return None
            logger.info(f"Trying {alternate} instead of {file_name}...")

        try:
            return await self._download(client, alternate)
        except httpx.HTTPError as e:
            logger.error(f"Error downloading {alternate}: {e}")
            return None

    async def load_storage_files(self) -> Dict[str, str]:
        """Download all context files from the storage bucket concurrently."""
        if not self.storage_configured:
            logger.warning("Object storage not configured - skipping context download")
            return {}

        client = self._client()
        try:
            contents = await asyncio.gather(
                *(self._download_with_alternate(client, name) for name in CONTEXT_FILES)
            )
        finally:
            if self._http_client is None:
                await client.aclose()

        return {
            _document_key(name): content
            for name, content in zip(CONTEXT_FILES, contents)
            if content is not None
        }

    async def load(self) -> Optional[ContextDocuments]:
        """Load all four documents, or ``None`` if any is missing."""
        if self.use_local:
            logger.info("Loading context files from local filesystem")
            documents = self.load_local_files()
            if len(documents) == len(CONTEXT_FILES):
                logger.info("All context files loaded from local filesystem")
                return ContextDocuments(**documents)
            if self.source == "local":
                logger.error("Some local context files are missing")
                return None

        logger.info("Loading context files from object storage")
        documents = await self.load_storage_files()
        if len(documents) != len(CONTEXT_FILES):
            missing = sorted(set(map(_document_key, CONTEXT_FILES)) - set(documents))
            logger.error(f"Some context files failed to load: {', '.join(missing)}")
            return None

        return ContextDocuments(**documents)

    async def load_specific_file(self, file_name: str) -> Optional[str]:
        """Download one file from the storage bucket."""
        if not self.storage_configured:
            return None
        client = self._client()
        try:
            return await self._download(client, file_name)
        except httpx.HTTPError as e:
            logger.error(f"Error loading {file_name}: {e}")
            return None
        finally:
            if self._http_client is None:
                await client.aclose()

    async def upload_context_file(self, file_name: str, content: str) -> bool:
        """Create or replace a file in the storage bucket."""
        if not self.storage_configured:
            logger.warning("Object storage not configured - cannot upload")
            return False
        client = self._client()
        try:
            response = await client.post(
                self._object_url(file_name),
                content=content.encode("utf-8"),
                headers={**self._headers(), "Content-Type": "text/plain", "x-upsert": "true"},
            )
            response.raise_for_status()
            return True
        except httpx.HTTPError as e:
            logger.error(f"Error uploading {file_name}: {e}")
            return False
        finally:
            if self._http_client is None:
                await client.aclose()

    async def get_context_files_metadata(self) -> Optional[List[Dict[str, Any]]]:
        """List the objects in the storage bucket."""
        if not self.storage_configured:
            return None
        client = self._client()
        try:
            response = await client.post(
                f"{self.storage_url}/storage/v1/object/list/{self.bucket}",
                json={"prefix": "", "limit": 100},
                headers=self._headers(),
            )
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Error listing context files: {e}")
            return None
        finally:
            if self._http_client is None:
                await client.aclose()
