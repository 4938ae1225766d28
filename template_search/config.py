import os
from typing import List, Optional
from urllib.parse import urlparse

from dotenv import load_dotenv
from pydantic import BaseModel

from .errors import ConfigurationError

load_dotenv()


class IndexNames(BaseModel):
    """Physical index names for the two document kinds."""

    template: str = "ts-search-index"
    suggestion: str = "ts-suggestion-index"

    def for_kind(self, kind: str) -> str:
        if kind == "templates":
            return self.template
        if kind == "suggestions":
            return self.suggestion
        raise KeyError(kind)


class FieldBoosts(BaseModel):
    """
    Multi-field match weights for template search.

    Tuning constants; changing them never touches the planning logic.
    """

    tags: float = 12
    title: float = 10
    author: float = 4
    css_class: float = 1
    description: float = 7


class OpenSearchSettings(BaseModel):
    hosts: List[str]
    username: str
    password: str
    verify_certs: bool = False
    timeout: float = 10.0
    indexes: IndexNames = IndexNames()
    boosts: FieldBoosts = FieldBoosts()

    @property
    def use_ssl(self) -> bool:
        return any(urlparse(h).scheme == "https" for h in self.hosts)


class SyncSettings(BaseModel):
    source_url: str
    window_minutes: int = 20


def _env_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")


def _parse_hosts(raw: str) -> List[str]:
    hosts = [h.strip() for h in raw.split(",") if h.strip()]
    if not hosts:
        raise ConfigurationError("OPENSEARCH_HOSTS must list at least one node")

    for host in hosts:
        parsed = urlparse(host)
        if parsed.scheme not in ("http", "https") or not parsed.hostname:
            raise ConfigurationError(f"Invalid OpenSearch node address {host!r}")
    return hosts


def get_opensearch_settings() -> OpenSearchSettings:
    username = os.getenv("OPENSEARCH_USER", "").strip()
    password = os.getenv("OPENSEARCH_PASSWORD", "").strip()
    if not username:
        raise ConfigurationError("OPENSEARCH_USER is not set")
    if not password:
        raise ConfigurationError("OPENSEARCH_PASSWORD is not set")

    return OpenSearchSettings(
        hosts=_parse_hosts(os.getenv("OPENSEARCH_HOSTS", "http://opensearch:9200")),
        username=username,
        password=password,
        verify_certs=os.getenv("OPENSEARCH_VERIFY_CERTS", "false").lower()
        in ("1", "true", "yes"),
        timeout=_env_float("OPENSEARCH_TIMEOUT", "10"),
        indexes=IndexNames(
            template=os.getenv("TEMPLATE_INDEX", "ts-search-index"),
            suggestion=os.getenv("SUGGESTION_INDEX", "ts-suggestion-index"),
        ),
        boosts=FieldBoosts(
            tags=_env_float("BOOST_TAGS", "12"),
            title=_env_float("BOOST_TITLE", "10"),
            author=_env_float("BOOST_AUTHOR", "4"),
            css_class=_env_float("BOOST_CSS", "1"),
            description=_env_float("BOOST_DESCRIPTION", "7"),
        ),
    )


def get_sync_settings() -> SyncSettings:
    source_url: Optional[str] = os.getenv("DOCUMENT_SOURCE_URL")
    if not source_url:
        raise ConfigurationError("DOCUMENT_SOURCE_URL is not set")

    return SyncSettings(
        source_url=source_url,
        window_minutes=_env_int("SYNC_WINDOW_MINUTES", "20"),
    )
