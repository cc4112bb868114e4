"""Shared fixtures: an in-memory GitHub repository behind httpx.MockTransport."""

import base64
import hashlib
import json

import httpx
import pytest

from ghstore import FileStore, StoreConfig

ACCOUNT = "octo"
REPO = "drive"
CONTENTS_PREFIX = f"/repos/{ACCOUNT}/{REPO}/contents/"
RAW_PREFIX = f"/{ACCOUNT}/{REPO}/main/"


def blob_sha(data: bytes) -> str:
    return hashlib.sha1(b"blob %d\0" % len(data) + data).hexdigest()


class FakeGitHub:
    """Minimal contents API and raw mirror for one repository."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.requests: list[httpx.Request] = []

    def add(self, path: str, data: str | bytes) -> str:
        self.files[path] = data.encode("utf-8") if isinstance(data, str) else data
        return blob_sha(self.files[path])

    def calls(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]

    def payloads(self, method: str) -> list[dict]:
        return [json.loads(r.content) for r in self.calls(method)]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if host == "raw.githubusercontent.com" and path.startswith(RAW_PREFIX):
            data = self.files.get(path[len(RAW_PREFIX):])
            if data is None:
                return httpx.Response(404, text="404: Not Found")
            return httpx.Response(
                200, content=data, headers={"Content-Type": "text/plain; charset=utf-8"}
            )

        if host == "api.github.com" and path.startswith(CONTENTS_PREFIX):
            name = path[len(CONTENTS_PREFIX):]
            handler = getattr(self, f"_{request.method.lower()}")
            return handler(name, request)

        return httpx.Response(404, json={"message": "Not Found"})

    def _record(self, name: str) -> dict:
        data = self.files[name]
        url = f"https://api.github.com{CONTENTS_PREFIX}{name}"
        return {
            "name": name.rsplit("/", 1)[-1],
            "path": name,
            "sha": blob_sha(data),
            "size": len(data),
            "url": f"{url}?ref=main",
            "html_url": f"https://github.com/{ACCOUNT}/{REPO}/blob/main/{name}",
            "git_url": f"https://api.github.com/repos/{ACCOUNT}/{REPO}/git/blobs/{blob_sha(data)}",
            "download_url": f"https://raw.githubusercontent.com{RAW_PREFIX}{name}",
            "type": "file",
            # GitHub wraps base64 content with newlines
            "content": base64.encodebytes(data).decode("ascii"),
            "encoding": "base64",
            "_links": {"self": url},
        }

    def _get(self, name: str, request: httpx.Request) -> httpx.Response:
        if name not in self.files:
            return httpx.Response(404, json={"message": "Not Found"})
        return httpx.Response(200, json=self._record(name))

    def _put(self, name: str, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content)
        exists = name in self.files
        sha = body.get("sha")
        if exists and sha is None:
            return httpx.Response(422, json={"message": '"sha" wasn\'t supplied.'})
        if exists and sha != blob_sha(self.files[name]):
            return httpx.Response(409, json={"message": "does not match"})
        if not exists and sha is not None:
            return httpx.Response(404, json={"message": "Not Found"})
        self.files[name] = base64.b64decode(body["content"])
        return httpx.Response(200 if exists else 201, json={"content": self._record(name)})

    def _delete(self, name: str, request: httpx.Request) -> httpx.Response:
        if name not in self.files:
            return httpx.Response(404, json={"message": "Not Found"})
        body = json.loads(request.content)
        if body.get("sha") != blob_sha(self.files[name]):
            return httpx.Response(409, json={"message": "does not match"})
        del self.files[name]
        return httpx.Response(200, json={"content": None})


@pytest.fixture
def config() -> StoreConfig:
    return StoreConfig(account=ACCOUNT, repo=REPO, token="ghp_test_12345")


@pytest.fixture
def github() -> FakeGitHub:
    fake = FakeGitHub()
    fake.add("README.md", "hello\n")
    return fake


@pytest.fixture
def store(config: StoreConfig, github: FakeGitHub) -> FileStore:
    return FileStore.from_config(config, transport=httpx.MockTransport(github.handle))
