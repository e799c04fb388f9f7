from pkgfeeds.integrations.http.abc import HttpClient
from pkgfeeds.integrations.http.types import HttpResponse

__all__ = ["HttpClient", "HttpResponse"]
