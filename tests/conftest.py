from __future__ import annotations

import hashlib
from typing import Dict, Generator, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

import httpx
import pytest

from jarkeeper.utils.http import HTTPClient
from jarkeeper.models import Repository

REPO1_URL = "https://repo1.test/maven2/"
REPO2_URL = "https://repo2.test/releases/"

POM_NAMESPACE = "http://maven.apache.org/POM/4.0.0"

Content = Union[str, bytes]


# ---------------------------------------------------------------------------
# XML builders
# ---------------------------------------------------------------------------


def dependency_xml(
    group_id: str,
    artifact_id: str,
    version: Optional[str] = None,
    *,
    scope: Optional[str] = None,
    optional: Optional[str] = None,
    classifier: Optional[str] = None,
    type: Optional[str] = None,
    exclusions: Sequence[Tuple[str, str]] = (),
) -> str:
    """Render a ``<dependency>`` element."""
    parts = [f"<groupId>{group_id}</groupId>", f"<artifactId>{artifact_id}</artifactId>"]
    for tag, value in (
        ("version", version),
        ("classifier", classifier),
        ("type", type),
        ("scope", scope),
        ("optional", optional),
    ):
        if value is not None:
            parts.append(f"<{tag}>{value}</{tag}>")
    if exclusions:
        parts.append(
            "<exclusions>"
            + "".join(
                f"<exclusion><groupId>{g}</groupId><artifactId>{a}</artifactId></exclusion>"
                for g, a in exclusions
            )
            + "</exclusions>"
        )
    return "<dependency>" + "".join(parts) + "</dependency>"


def pom_xml(
    group_id: Optional[str],
    artifact_id: str,
    version: Optional[str],
    *,
    dependencies: Iterable[str] = (),
    management: Iterable[str] = (),
    properties: Optional[Mapping[str, str]] = None,
    parent: Optional[Tuple[str, str, str]] = None,
    packaging: Optional[str] = None,
    extra: str = "",
    namespace: bool = True,
) -> str:
    """Render a POM document."""
    xmlns = f' xmlns="{POM_NAMESPACE}"' if namespace else ""
    body = ["<modelVersion>4.0.0</modelVersion>"]
    if parent is not None:
        pg, pa, pv = parent
        body.append(
            f"<parent><groupId>{pg}</groupId><artifactId>{pa}</artifactId>"
            f"<version>{pv}</version></parent>"
        )
    if group_id is not None:
        body.append(f"<groupId>{group_id}</groupId>")
    body.append(f"<artifactId>{artifact_id}</artifactId>")
    if version is not None:
        body.append(f"<version>{version}</version>")
    if packaging is not None:
        body.append(f"<packaging>{packaging}</packaging>")
    if properties:
        body.append(
            "<properties>"
            + "".join(f"<{k}>{v}</{k}>" for k, v in properties.items())
            + "</properties>"
        )
    management = list(management)
    if management:
        body.append(
            "<dependencyManagement><dependencies>"
            + "".join(management)
            + "</dependencies></dependencyManagement>"
        )
    dependencies = list(dependencies)
    if dependencies:
        body.append("<dependencies>" + "".join(dependencies) + "</dependencies>")
    body.append(extra)
    return f'<?xml version="1.0" encoding="UTF-8"?>\n<project{xmlns}>' + "".join(body) + "</project>"


def metadata_xml(
    versions: Sequence[str],
    *,
    latest: Optional[str] = None,
    release: Optional[str] = None,
    group_id: str = "",
    artifact_id: str = "",
) -> str:
    """Render an artifact-level ``maven-metadata.xml``."""
    versioning = []
    if latest is not None:
        versioning.append(f"<latest>{latest}</latest>")
    if release is not None:
        versioning.append(f"<release>{release}</release>")
    versioning.append(
        "<versions>" + "".join(f"<version>{v}</version>" for v in versions) + "</versions>"
    )
    versioning.append("<lastUpdated>20230310123456</lastUpdated>")
    return (
        "<metadata>"
        f"<groupId>{group_id}</groupId><artifactId>{artifact_id}</artifactId>"
        "<versioning>" + "".join(versioning) + "</versioning></metadata>"
    )


def snapshot_metadata_xml(version: str, timestamp: str, build_number: str) -> str:
    """Render a per-version snapshot ``maven-metadata.xml``."""
    return (
        f"<metadata><version>{version}</version><versioning><snapshot>"
        f"<timestamp>{timestamp}</timestamp><buildNumber>{build_number}</buildNumber>"
        "</snapshot></versioning></metadata>"
    )


def sha256_hex(content: bytes) -> str:
    return hashlib.sha256(content).hexdigest()


# ---------------------------------------------------------------------------
# In-memory repository server
# ---------------------------------------------------------------------------


class MavenServer:
    """In-memory Maven2 repositories served through ``httpx.MockTransport``.

    Unknown URLs answer 404. Every request URL is recorded in order.
    """

    def __init__(self) -> None:
        self.files: Dict[str, bytes] = {}
        self.statuses: Dict[str, int] = {}
        self.requests: List[str] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url in self.statuses:
            return httpx.Response(self.statuses[url], content=b"failure")
        if url in self.files:
            return httpx.Response(200, content=self.files[url])
        return httpx.Response(404, content=b"not found")

    def client(self, **kwargs: object) -> HTTPClient:
        kwargs.setdefault("max_retries", 0)
        return HTTPClient(transport=httpx.MockTransport(self.handler), **kwargs)  # type: ignore[arg-type]

    def put(self, url: str, content: Content) -> None:
        self.files[url] = content.encode("utf-8") if isinstance(content, str) else content

    def fail(self, url: str, status: int = 500) -> None:
        self.statuses[url] = status

    @staticmethod
    def artifact_base(repo_url: str, group_id: str, artifact_id: str) -> str:
        return f"{repo_url}{group_id.replace('.', '/')}/{artifact_id}/"

    def publish_pom(
        self, repo_url: str, group_id: str, artifact_id: str, version: str, pom: str
    ) -> str:
        url = f"{self.artifact_base(repo_url, group_id, artifact_id)}{version}/{artifact_id}-{version}.pom"
        self.put(url, pom)
        return url

    def publish_metadata(
        self, repo_url: str, group_id: str, artifact_id: str, document: str
    ) -> str:
        url = f"{self.artifact_base(repo_url, group_id, artifact_id)}maven-metadata.xml"
        self.put(url, document)
        return url

    def publish_jar(
        self,
        repo_url: str,
        group_id: str,
        artifact_id: str,
        version: str,
        content: bytes,
        *,
        sha256: bool = False,
    ) -> str:
        url = f"{self.artifact_base(repo_url, group_id, artifact_id)}{version}/{artifact_id}-{version}.jar"
        self.put(url, content)
        if sha256:
            self.put(url + ".sha256", sha256_hex(content))
        return url

    def publish_project(
        self,
        group_id: str,
        artifact_id: str,
        version: str,
        *,
        dependencies: Iterable[str] = (),
        repo_url: str = REPO1_URL,
        **pom_kwargs: object,
    ) -> str:
        """Publish a POM and a jar for a simple project."""
        self.publish_jar(repo_url, group_id, artifact_id, version, f"{artifact_id}-{version}".encode())
        return self.publish_pom(
            repo_url,
            group_id,
            artifact_id,
            version,
            pom_xml(group_id, artifact_id, version, dependencies=dependencies, **pom_kwargs),  # type: ignore[arg-type]
        )


@pytest.fixture
def maven() -> MavenServer:
    """In-memory repository server."""
    return MavenServer()


@pytest.fixture
def client(maven: MavenServer) -> Generator[HTTPClient, None, None]:
    """HTTP client wired to :func:`maven`, without retries."""
    http = maven.client()
    yield http
    http.close()


@pytest.fixture
def repo1() -> Repository:
    return Repository(REPO1_URL)


@pytest.fixture
def repo2() -> Repository:
    return Repository(REPO2_URL)
