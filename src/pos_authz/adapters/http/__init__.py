"""HTTP adapter – httpx client and the roster service client."""
from pos_authz.adapters.http.client import HttpClient, HttpxHttpClient
from pos_authz.adapters.http.roster_client import HttpRosterClient

__all__ = ["HttpClient", "HttpRosterClient", "HttpxHttpClient"]
