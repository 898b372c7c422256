"""
Sanity API helper functions for the Webflow → Sanity migration.

This module implements the write side of the migration against the Sanity
HTTP API. Assets referenced by URL are downloaded and re-uploaded through
``/assets/images`` or ``/assets/files``, and documents are written with a
``createOrReplace`` mutation so that a re-run overwrites the documents of a
previous run instead of duplicating them.

There is no retry: a failed download, upload or mutation abandons that
document for this run and processing moves on to the next one.

Usage example::

    from sanity_migration_tool.parsers.field_mapper import map_to_sanity_document
    from sanity_migration_tool.migrators.sanity_migrator import upload_documents

    cfg = {"project_id": ..., "dataset": "production", "token": ...}
    documents = [map_to_sanity_document(item) for item in items]
    report = upload_documents(cfg, documents)
    print(report.summary())
"""

from __future__ import annotations

import copy
from typing import Any, Dict, Iterable, Optional, Tuple
from urllib.parse import quote

import requests

from ..utils.errors import MigrationReport

DEFAULT_API_VERSION = "v2021-06-07"
DEFAULT_API_HOST = "api.sanity.io"
FILE_CONTENT_TYPE = "application/json"


class AssetError(Exception):
    """Raised when an asset cannot be downloaded or uploaded."""

    def __init__(self, code: str, url: str, cause: BaseException) -> None:
        super().__init__(f"{url}: {cause}")
        self.code = code
        self.url = url
        self.cause = cause


def sanity_headers(cfg: Dict[str, Any]) -> Dict[str, str]:
    """
    Construct the default headers required for Sanity API requests.

    :param cfg: A configuration dictionary with the write ``token``.
    :return: A dictionary of headers including Authorization.
    """
    return {
        "Authorization": f"Bearer {cfg['token']}",
    }


def sanity_api_url(cfg: Dict[str, Any], path: str) -> str:
    host = cfg.get("api_host") or DEFAULT_API_HOST
    version = cfg.get("api_version") or DEFAULT_API_VERSION
    return f"https://{cfg['project_id']}.{host}/{version}/{path.lstrip('/')}"


###############################################################################
# Asset helpers
###############################################################################

def download_asset(url: str, session=None) -> Tuple[bytes, Optional[str]]:
    """
    Download an asset.

    :param url: Source URL of the asset.
    :return: The body bytes and the ``Content-Type`` header, if any.
    :raises requests.RequestException: on network errors or non-2xx status.
    """
    http = session or requests
    resp = http.get(url)
    resp.raise_for_status()
    return resp.content, resp.headers.get("Content-Type")


def upload_asset(
    cfg: Dict[str, Any],
    kind: str,
    data: bytes,
    *,
    filename: str,
    content_type: Optional[str] = None,
    session=None,
) -> str:
    """
    Upload binary data as a Sanity asset.

    :param cfg: Sanity configuration dictionary.
    :param kind: Either ``"image"`` or ``"file"``.
    :param data: The asset bytes.
    :param filename: Original filename recorded on the asset.
    :param content_type: Declared content type of the payload.
    :return: The ``_id`` of the created asset document.
    :raises requests.RequestException: on failure.
    :raises ValueError: if the response does not carry an asset id.
    """
    if kind not in ("image", "file"):
        raise ValueError(f"Unknown asset kind: {kind}")
    http = session or requests
    endpoint = "images" if kind == "image" else "files"
    url = sanity_api_url(cfg, f"assets/{endpoint}/{cfg['dataset']}") + f"?filename={quote(filename)}"
    resp = http.post(
        url,
        headers={**sanity_headers(cfg), "Content-Type": content_type or "application/octet-stream"},
        data=data,
    )
    resp.raise_for_status()
    asset_id = (resp.json().get("document") or {}).get("_id")
    if not asset_id:
        raise ValueError(f"Asset upload for {filename} did not return an id")
    return asset_id


def _asset_url(document: Dict[str, Any], slot: str) -> Optional[str]:
    block = document.get(slot)
    if not isinstance(block, dict):
        return None
    return (block.get("asset") or {}).get("url")


def _transfer(cfg: Dict[str, Any], url: str, kind: str, *, filename: str, content_type: Optional[str], session) -> str:
    try:
        data, downloaded_type = download_asset(url, session)
    except requests.RequestException as e:
        raise AssetError("ASSET_DOWNLOAD", url, e) from e
    try:
        return upload_asset(
            cfg, kind, data,
            filename=filename,
            content_type=content_type or downloaded_type,
            session=session,
        )
    except (requests.RequestException, ValueError) as e:
        raise AssetError("ASSET_UPLOAD", url, e) from e


def resolve_assets(cfg: Dict[str, Any], document: Dict[str, Any], session=None) -> Dict[str, Any]:
    """
    Replace URL-form image and file assets with references to uploaded assets.

    The image is uploaded as an image asset and the file as a file asset with
    the configured ``file_content_type`` (``application/json`` by default),
    both named after the document ``_id``. The input document is left
    untouched; a resolved copy is returned.

    :raises AssetError: if a download or upload fails.
    """
    resolved = copy.deepcopy(document)
    image_url = _asset_url(resolved, "image")
    if image_url:
        asset_id = _transfer(cfg, image_url, "image", filename=resolved["_id"], content_type=None, session=session)
        resolved["image"]["asset"] = {"_type": "reference", "_ref": asset_id}

    file_url = _asset_url(resolved, "file")
    if file_url:
        asset_id = _transfer(
            cfg, file_url, "file",
            filename=resolved["_id"],
            content_type=cfg.get("file_content_type") or FILE_CONTENT_TYPE,
            session=session,
        )
        resolved["file"]["asset"] = {"_type": "reference", "_ref": asset_id}
    return resolved


###############################################################################
# Document helpers
###############################################################################

def create_or_replace(cfg: Dict[str, Any], document: Dict[str, Any], session=None) -> Dict[str, Any]:
    """
    Create the document, or fully replace an existing one with the same ``_id``.

    :param cfg: Sanity configuration dictionary.
    :param document: The complete Sanity document.
    :return: The mutation response payload.
    :raises requests.HTTPError: on failure.
    """
    http = session or requests
    resp = http.post(
        sanity_api_url(cfg, f"data/mutate/{cfg['dataset']}"),
        headers={**sanity_headers(cfg), "Content-Type": "application/json"},
        json={"mutations": [{"createOrReplace": document}]},
    )
    resp.raise_for_status()
    return resp.json()


def upload_documents(
    cfg: Dict[str, Any],
    documents: Iterable[Dict[str, Any]],
    *,
    session=None,
    dry_run: bool = False,
    report: Optional[MigrationReport] = None,
) -> MigrationReport:
    """
    Resolve assets and upsert each document, one at a time, in order.

    A failing asset abandons that document (nothing is written for it) and a
    failing upsert is recorded; either way the next document is processed.

    :param cfg: Sanity configuration dictionary.
    :param documents: Mapped documents whose assets may still be URLs.
    :param session: Optional ``requests.Session`` shared by all calls.
    :param dry_run: Record every document as skipped without network calls.
    :param report: Report to append to; a new one is created if omitted.
    :return: The report with one result per document.
    """
    report = report if report is not None else MigrationReport()

    for document in documents:
        if dry_run:
            report.record_skip(document)
            continue
        try:
            resolved = resolve_assets(cfg, document, session)
        except AssetError as e:
            report.record_error(e.code, document, e)
            continue
        try:
            create_or_replace(cfg, resolved, session)
        except (requests.RequestException, ValueError) as e:
            report.record_error("SANITY_UPSERT", document, e)
            continue
        report.record_ok(resolved)

    return report
