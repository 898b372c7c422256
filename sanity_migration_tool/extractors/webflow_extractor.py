"""
Webflow CMS API helpers.

Read-only listing of sites, the collections of a site and the items of a
collection. Listing failures never raise: they are printed and degrade to
an empty (or, for paginated items, partial) result, so callers cannot tell
"none exist" from "fetch failed".
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import requests

DEFAULT_BASE_URL = "https://api.webflow.com"
PAGE_SIZE = 100


def webflow_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    return {
        "accept": "application/json",
        "authorization": f"Bearer {cfg['api_key']}",
    }


def _base_url(cfg: Dict[str, Any]) -> str:
    return (cfg.get("base_url") or DEFAULT_BASE_URL).rstrip("/")


def _normalize_entity(entity: Dict[str, Any]) -> Dict[str, Any]:
    # v1 answers with ``_id``; newer payloads use ``id``.
    if "_id" not in entity and "id" in entity:
        entity = {**entity, "_id": entity["id"]}
    return entity


def _get_list(cfg: Dict[str, Any], url: str, session=None) -> List[Dict[str, Any]]:
    http = session or requests
    resp = http.get(url, headers=webflow_headers(cfg))
    resp.raise_for_status()
    data = resp.json()
    # Listing endpoints return a bare array; tolerate an enveloped one.
    if isinstance(data, dict):
        data = data.get("sites") or data.get("collections") or []
    return [_normalize_entity(e) for e in data if isinstance(e, dict)]


def fetch_webflow_sites(cfg: Dict[str, Any], session=None) -> List[Dict[str, Any]]:
    """
    Fetch all Webflow sites available to the API key.

    :param cfg: Webflow configuration dictionary with ``api_key`` and
        optionally ``base_url``.
    :param session: Optional ``requests.Session`` (or compatible object).
    :return: A list of site objects, or ``[]`` on error.
    """
    try:
        return _get_list(cfg, f"{_base_url(cfg)}/sites", session)
    except (requests.RequestException, ValueError) as e:
        print(f"Error fetching Webflow sites: {e}")
        return []


def fetch_collections_for_site(cfg: Dict[str, Any], site_id: str, session=None) -> List[Dict[str, Any]]:
    """
    Fetch the collections of a Webflow site.

    :return: A list of collection objects, or ``[]`` on error.
    """
    try:
        return _get_list(cfg, f"{_base_url(cfg)}/sites/{site_id}/collections", session)
    except (requests.RequestException, ValueError) as e:
        print(f"Error fetching collections for site ID {site_id}: {e}")
        return []


def fetch_collection_items(cfg: Dict[str, Any], collection_id: str, session=None) -> List[Dict[str, Any]]:
    """
    Fetch every item of a Webflow collection using offset pagination.

    Pages of ``page_size`` items (default 100) are requested from offset 0
    until a page comes back short. On the first error the items gathered so
    far are returned.

    :param cfg: Webflow configuration dictionary.
    :param collection_id: The Webflow collection id.
    :param session: Optional ``requests.Session`` (or compatible object).
    :return: The items in the order the API returned them.
    """
    http = session or requests
    limit = int(cfg.get("page_size") or PAGE_SIZE)
    url = f"{_base_url(cfg)}/collections/{collection_id}/items"
    items: List[Dict[str, Any]] = []
    offset = 0
    more_items = True

    while more_items:
        try:
            resp = http.get(url, headers=webflow_headers(cfg), params={"offset": offset, "limit": limit})
            resp.raise_for_status()
            page = resp.json().get("items") or []
            items.extend(page)
            more_items = len(page) == limit
            offset += limit
        except (requests.RequestException, ValueError, AttributeError) as e:
            print(f"Error fetching collection items for collection ID {collection_id}: {e}")
            more_items = False

    return items
