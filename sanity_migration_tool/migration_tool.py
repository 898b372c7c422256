"""
High-level orchestration of the Webflow → Sanity migration.

This module defines a :class:`SanityMigrationTool` class that ties together
the extractors, parsers, migrators and utilities into a complete pipeline:
list Webflow sites, let the operator pick one, list its collections, let
the operator pick one, fetch every item, map them to Sanity documents,
re-upload their assets, write the documents and report the outcome.

Configuration is supplied via a JSON file path or directly as a dictionary
and completed from the environment (a ``.env`` file is honoured). The
``webflow`` section holds the ``api_key``; the ``sanity`` section holds the
``project_id``, ``dataset`` and write ``token``. Optional migration settings
(e.g. dry-run) can be provided under the ``migration`` key.
"""

from __future__ import annotations

import copy
import json
import os
from typing import Any, Callable, Dict, List, Optional

import requests
from dotenv import load_dotenv
from pydantic import ValidationError

from .extractors.webflow_extractor import (
    fetch_webflow_sites,
    fetch_collections_for_site,
    fetch_collection_items,
)
from .parsers.field_mapper import map_to_sanity_document, sanity_id_for
from .migrators.sanity_migrator import upload_documents
from .utils.errors import MigrationReport
from .utils.id_map import generate_id_map_csv
from .utils.prompts import get_user_selection


def load_config(config: Optional[Dict[str, Any]] = None, *, config_file: Optional[str] = None) -> Dict[str, Any]:
    """Read the JSON config file if present and fill in defaults from the environment."""
    load_dotenv()
    if config_file and os.path.exists(config_file):
        with open(config_file, "r", encoding="utf-8") as f:
            config = json.load(f)
    elif config is None:
        config = {}
    else:
        # the caller's dict is left as it was
        config = copy.deepcopy(config)

    config.setdefault("webflow", {})
    config["webflow"].setdefault("api_key", os.getenv("WEBFLOW_API_KEY", ""))
    config["webflow"].setdefault("base_url", "https://api.webflow.com")
    config["webflow"].setdefault("page_size", 100)

    config.setdefault("sanity", {})
    config["sanity"].setdefault("project_id", os.getenv("SANITY_PROJECT_ID", ""))
    config["sanity"].setdefault("dataset", os.getenv("SANITY_DATASET", ""))
    config["sanity"].setdefault("token", os.getenv("SANITY_TOKEN", ""))
    config["sanity"].setdefault("api_version", "v2021-06-07")
    config["sanity"].setdefault("api_host", "api.sanity.io")

    config.setdefault("migration", {})
    config["migration"].setdefault("dry_run", False)
    config["migration"].setdefault("limit", None)
    config["migration"].setdefault("id_prefix", "imported-")
    config["migration"].setdefault("document_type", "exampleSchema")
    config["migration"].setdefault("file_content_type", "application/json")
    config["migration"].setdefault("id_map_path", "reports/id_map.csv")
    config["migration"].setdefault("log_file", "reports/migration/migration.log")
    return config


class SanityMigrationTool:
    """
    Encapsulates all state and behavior required to migrate one Webflow
    collection to Sanity. The tool owns one HTTP session per API and the
    operator input/output functions, and hands them to each stage.
    Per-document outcomes are collected in a :class:`MigrationReport`.
    """

    def __init__(
        self,
        config: Optional[Dict[str, Any]] = None,
        *,
        config_file: Optional[str] = None,
        input_fn: Callable[[str], str] = input,
        print_fn: Callable[[str], None] = print,
        webflow_session=None,
        sanity_session=None,
    ) -> None:
        self.config = load_config(config, config_file=config_file)
        self.input_fn = input_fn
        self.print_fn = print_fn
        self.webflow_session = webflow_session or requests.Session()
        self.sanity_session = sanity_session or requests.Session()

    def log_message(self, message: str, level: str = "INFO") -> None:
        print(f"[{level}] {message}")
        # Append to log file
        log_file = self.config["migration"]["log_file"]
        if log_file:
            os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
            with open(log_file, "a", encoding="utf-8") as f:
                f.write(f"{level}: {message}\n")

    def select(self, message: str, items: List[Dict[str, Any]]) -> Dict[str, Any]:
        return get_user_selection(message, items, input_fn=self.input_fn, print_fn=self.print_fn)

    def map_items(self, items: List[Dict[str, Any]], report: MigrationReport) -> List[Dict[str, Any]]:
        """Map Webflow items to Sanity documents, keeping their order."""
        migration = self.config["migration"]
        limit: Optional[int] = migration.get("limit")
        documents: List[Dict[str, Any]] = []
        for count, item in enumerate(items):
            if limit is not None and count >= limit:
                break
            try:
                documents.append(map_to_sanity_document(
                    item,
                    id_prefix=migration["id_prefix"],
                    document_type=migration["document_type"],
                ))
            except ValidationError as e:
                placeholder = {"_id": sanity_id_for(str(item.get("_id", "")), migration["id_prefix"]), "title": item.get("heading")}
                report.record_error("MAPPING", placeholder, e)
                self.log_message(f"Could not map Webflow item {item.get('_id')!r}: {e}", "ERROR")
        return documents

    def run(self) -> Optional[MigrationReport]:
        """
        Run the full interactive migration.

        :return: The batch report, or ``None`` when nothing could be
            selected or fetched.
        """
        webflow_cfg = self.config["webflow"]
        migration = self.config["migration"]
        dry_run: bool = migration.get("dry_run", False)

        # Fetch Webflow sites and get user selection
        sites = fetch_webflow_sites(webflow_cfg, self.webflow_session)
        if not sites:
            self.log_message("No Webflow sites found (or the request failed).", "ERROR")
            return None
        site = self.select("Choose a site: ", sites)
        self.log_message(f"Selected site {site.get('name')} ({site.get('_id')})")

        # Fetch collections for selected site and get user selection
        collections = fetch_collections_for_site(webflow_cfg, site["_id"], self.webflow_session)
        if not collections:
            self.log_message(f"No collections found for site {site.get('_id')} (or the request failed).", "ERROR")
            return None
        collection = self.select("Choose a collection: ", collections)
        self.log_message(f"Selected collection {collection.get('name')} ({collection.get('_id')})")

        items = fetch_collection_items(webflow_cfg, collection["_id"], self.webflow_session)
        if not items:
            self.log_message(f"No items found in collection {collection.get('_id')}.", "WARNING")
            return None
        self.log_message(f"Fetched {len(items)} items from Webflow.")

        report = MigrationReport()
        documents = self.map_items(items, report)
        self.log_message(f"Mapped {len(documents)} documents" + (" (dry-run)" if dry_run else ""))

        sanity_cfg = {**self.config["sanity"], "file_content_type": migration["file_content_type"]}
        upload_documents(sanity_cfg, documents, session=self.sanity_session, dry_run=dry_run, report=report)

        rows: List[Dict[str, Any]] = []
        for item in items:
            sanity_id = sanity_id_for(str(item.get("_id", "")), migration["id_prefix"])
            status = report.status_of(sanity_id)
            if status is None:
                # beyond the configured limit
                continue
            rows.append({"WebflowId": item.get("_id", ""), "Slug": item.get("slug"), "SanityId": sanity_id, "Status": status})

        try:
            path = generate_id_map_csv(rows, out_path=migration["id_map_path"])
            self.log_message(f"Id map CSV generated with {len(rows)} entries: {path}")
        except OSError as e:
            self.log_message(f"Failed to write id map: {e}", "ERROR")

        self.log_message(report.summary())
        return report
