from .artifacts import ArtifactClient
from .http_client import HttpClient, url_join

__all__ = ["ArtifactClient", "HttpClient", "url_join"]
