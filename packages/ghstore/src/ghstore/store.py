"""Path-addressed file operations backed by a GitHub repository."""

import base64
import logging

import httpx

from . import messages
from .models import FileRecord, StoreConfig
from .transport import GitHubTransport

logger = logging.getLogger(__name__)

# Faults that turn into a logged failure instead of an exception.
# InvalidURL is raised for paths httpx cannot put in a URL (control characters, length).
# ValueError and TypeError cover bad JSON, base64, UTF-8 and model validation.
STORE_ERRORS = (httpx.HTTPError, httpx.InvalidURL, ValueError, TypeError)


def encode(data: str | bytes) -> str:
    raw = data if isinstance(data, bytes) else data.encode("utf-8")
    return base64.b64encode(raw).decode("ascii")


class FileStore:
    """
    File store on top of the GitHub contents API.

    Every operation returns a value or a falsy sentinel; failures are
    logged and never raised.
    """

    def __init__(self, transport: GitHubTransport):
        self.transport = transport

    @classmethod
    def from_config(
        cls,
        config: StoreConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "FileStore":
        return cls(GitHubTransport(config, transport=transport))

    async def exist(self, path: str) -> bool:
        """Check whether a file exists on the configured branch."""
        url = self.transport.contents_url(path)
        try:
            response = await self.transport.request("GET", url)
            if response.is_success:
                return True
            self.transport.report("exist", url, response)
        except STORE_ERRORS as e:
            self.transport.report("exist", str(e))
        return False

    async def get(self, path: str, binary: bool = False) -> FileRecord | None:
        """
        Fetch file metadata and content through the contents API.

        Args:
            path: File path in repository
            binary: Return content as bytes instead of UTF-8 text

        Returns:
            FileRecord with decoded content, or None on failure
        """
        url = self.transport.contents_url(path)
        try:
            response = await self.transport.request("GET", url)
            if not response.is_success:
                self.transport.report("get: not found", url, response)
                return None
            data = response.json()
            if not isinstance(data, dict):
                # Directory listing
                self.transport.report("get: not a file", url, response)
                return None
            decoded = base64.b64decode(data.get("content") or "")
            data["content"] = decoded if binary else decoded.decode("utf-8")
            record = FileRecord(**data)
        except STORE_ERRORS as e:
            self.transport.report("get", str(e))
            return None
        logger.debug("Fetched %s (%d bytes, sha=%s)", path, record.size, record.sha)
        return record

    async def raw(self, path: str, binary: bool = False) -> bytes | str | None:
        """
        Fetch file content from the raw mirror, without metadata.

        Faster than ``get`` but may lag behind recent commits.
        """
        url = self.transport.raw_url(path)
        try:
            response = await self.transport.request("GET", url)
            if not response.is_success:
                self.transport.report("raw", url, response)
                return None
            return response.content if binary else response.text
        except STORE_ERRORS as e:
            self.transport.report("raw", str(e))
            return None

    async def resolve_sha(self, path: str) -> str | None:
        """Fetch the current revision sha of a file, or None if unavailable."""
        record = await self.get(path)
        if record is None:
            logger.warning("Cannot resolve sha for %s", path)
            return None
        return record.sha

    async def delete(self, path: str, sha: str | None = None) -> bool:
        """
        Delete a file.

        Args:
            path: File path in repository
            sha: Current revision sha; fetched first when omitted

        Returns:
            True if the file was deleted
        """
        if not sha:
            sha = await self.resolve_sha(path)
            if not sha:
                return False
        url = self.transport.contents_url(path)
        body = {"message": messages.delete_message(), "sha": sha}
        logger.info("Deleting %s", url)
        try:
            response = await self.transport.request("DELETE", url, json=body)
            if response.is_success:
                return True
            self.transport.report("delete", url, response)
        except STORE_ERRORS as e:
            self.transport.report("delete", str(e))
        return False

    async def commit(
        self, path: str, data: str | bytes, sha: str | None = None
    ) -> bool:
        """
        Overwrite an existing file.

        Args:
            path: File path in repository
            data: New content, text is stored as UTF-8
            sha: Current revision sha; fetched first when omitted

        Returns:
            True if the update was committed
        """
        body = {"message": messages.commit_message(path), "content": encode(data)}
        if not sha:
            sha = await self.resolve_sha(path)
            if not sha:
                return False
        body["sha"] = sha
        url = self.transport.contents_url(path)
        logger.info("Committing %s", url)
        try:
            response = await self.transport.request("PUT", url, json=body)
            if response.is_success:
                return True
            self.transport.report("commit", url, response)
        except STORE_ERRORS as e:
            self.transport.report("commit", str(e))
        return False

    async def create(self, path: str, data: str | bytes) -> bool:
        """Create a new file. Fails upstream if the path already exists."""
        body = {"message": messages.create_message(), "content": encode(data)}
        url = self.transport.contents_url(path)
        logger.info("Creating %s", url)
        try:
            response = await self.transport.request("PUT", url, json=body)
            if response.is_success:
                return True
            self.transport.report("create", url, response)
        except STORE_ERRORS as e:
            self.transport.report("create", str(e))
        return False
