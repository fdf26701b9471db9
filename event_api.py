from __future__ import annotations

import sys
from typing import Any, Dict, List, NamedTuple, Optional
from urllib.parse import urljoin

import requests

# ---- Config ----
API_BASE_URI = "https://supercooldesign.co.uk/api/technical-test/"
USER_AGENT = "Mozilla/5.0 (compatible; Bot/1.0)"
REQUEST_TIMEOUT_SECONDS = 5.0

API_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept-Language": "en-GB",
    "Connection": "keep-alive",
    "Pragma": "no-cache",
    "Cache-Control": "no-cache",
    "Content-Type": "application/json",
}

COLLECTIONS = ("events", "venues", "instances")


class Collections(NamedTuple):
    events: Optional[List[Dict[str, Any]]]
    venues: Optional[List[Dict[str, Any]]]
    instances: Optional[List[Dict[str, Any]]]


def build_session() -> requests.Session:
    """Session shared by the three calls so cookies carry across them."""
    session = requests.Session()
    session.headers.update(API_HEADERS)
    return session


def collection_url(base_url: str, name: str) -> str:
    if not base_url.endswith("/"):
        base_url += "/"
    return urljoin(base_url, name)


def fetch_collection(
    session: requests.Session,
    name: str,
    base_url: str = API_BASE_URI,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> Optional[List[Dict[str, Any]]]:
    """
    GET one collection and decode it as a list of records.

    Returns None when the request fails for any reason (HTTP error status,
    connection problem, timeout) or the body is not a JSON list. The failure
    is reported on stderr.
    """
    if name not in COLLECTIONS:
        raise ValueError(f"Unknown collection: {name!r}")

    url = collection_url(base_url, name)
    try:
        r = session.get(url, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except requests.RequestException as e:
        print(f"⚠️  Failed to fetch {name}: {e}", file=sys.stderr)
        return None
    except ValueError as e:
        print(f"⚠️  Invalid JSON in {name} response: {e}", file=sys.stderr)
        return None

    if not isinstance(data, list):
        print(f"⚠️  Unexpected {name} payload (expected a list).", file=sys.stderr)
        return None
    return [rec for rec in data if isinstance(rec, dict)]


def fetch_all(
    session: requests.Session,
    base_url: str = API_BASE_URI,
    timeout: float = REQUEST_TIMEOUT_SECONDS,
) -> Collections:
    events = fetch_collection(session, "events", base_url, timeout)
    venues = fetch_collection(session, "venues", base_url, timeout)
    instances = fetch_collection(session, "instances", base_url, timeout)
    return Collections(events=events, venues=venues, instances=instances)
