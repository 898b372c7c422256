"""
Structured logging helpers for migration errors and successes.

The :mod:`sanity_migration_tool.utils.errors` module centralizes the writing
of log entries for both failed and successful document migrations. Each
entry is appended to a JSON Lines file under ``reports/migration`` so that
the information can be reviewed or parsed after a run.

Two public functions are provided:

``report_error``
    Record an error that occurred for a document. An optional exception can
    be supplied and will be serialized to the log.

``report_ok``
    Record a successful step for a document. Additional key/value
    information can be attached to the entry via the ``extra`` parameter.

:class:`MigrationReport` collects one :class:`DocumentResult` per document
so that a run ends with a summary instead of scrolled console output.

The ``ERRORS`` dictionary maps error or event codes to human readable
messages. Codes not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

# Mapping of event codes used throughout the migration to descriptive messages.
ERRORS: Dict[str, str] = {
    "MAPPING": "Failed to map Webflow item to a Sanity document",
    "ASSET_DOWNLOAD": "Failed to download asset",
    "ASSET_UPLOAD": "Failed to upload asset to Sanity",
    "SANITY_UPSERT": "Failed to create or replace document in Sanity",
    "DRY_RUN": "Dry-run: document not written",
    "UPLOADED": "Document uploaded",
}

_REPORT_DIR = os.path.join("reports", "migration")
_ERROR_LOG = os.path.join(_REPORT_DIR, "errors.jsonl")
_OK_LOG = os.path.join(_REPORT_DIR, "success.jsonl")

STATUS_OK = "ok"
STATUS_FAILED = "failed"
STATUS_SKIPPED = "skipped"


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def report_error(code: str, document: Dict[str, Any], exc: Optional[BaseException] = None) -> None:
    """Log an error event for ``document``.

    Parameters
    ----------
    code:
        A key identifying the type of error. If ``code`` is present in
        :data:`ERRORS` its value will be used as the message.
    document:
        The Sanity document associated with the error. Only the ``_id`` and
        ``title`` keys are referenced if present.
    exc:
        Optional exception instance that triggered the error.
    """
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "id": document.get("_id"),
        "title": document.get("title"),
    }
    if exc is not None:
        entry["error"] = str(exc)
    print(f"[ERROR] {message}: {document.get('_id', '')}" + (f" ({exc})" if exc is not None else ""))
    _write_jsonl(_ERROR_LOG, entry)


def report_ok(code: str, document: Dict[str, Any], extra: Optional[Dict[str, Any]] = None) -> None:
    """Log a successful event for ``document``."""
    message = ERRORS.get(code, code)
    entry: Dict[str, Any] = {
        "code": code,
        "message": message,
        "id": document.get("_id"),
        "title": document.get("title"),
    }
    if extra:
        entry.update(extra)
    print(f"[OK] {message}: {document.get('_id', '')}")
    _write_jsonl(_OK_LOG, entry)


@dataclass
class DocumentResult:
    document_id: str
    status: str
    code: Optional[str] = None
    reason: Optional[str] = None


@dataclass
class MigrationReport:
    results: List[DocumentResult] = field(default_factory=list)

    def record_ok(self, document: Dict[str, Any], code: str = "UPLOADED", extra: Optional[Dict[str, Any]] = None) -> None:
        report_ok(code, document, extra)
        self.results.append(DocumentResult(document.get("_id", ""), STATUS_OK, code))

    def record_error(self, code: str, document: Dict[str, Any], exc: Optional[BaseException] = None) -> None:
        report_error(code, document, exc)
        reason = str(exc) if exc is not None else ERRORS.get(code, code)
        self.results.append(DocumentResult(document.get("_id", ""), STATUS_FAILED, code, reason))

    def record_skip(self, document: Dict[str, Any], code: str = "DRY_RUN") -> None:
        print(f"[INFO] {ERRORS.get(code, code)}: {document.get('_id', '')}")
        self.results.append(DocumentResult(document.get("_id", ""), STATUS_SKIPPED, code))

    def _count(self, status: str) -> int:
        return sum(1 for r in self.results if r.status == status)

    @property
    def succeeded(self) -> int:
        return self._count(STATUS_OK)

    @property
    def failed(self) -> int:
        return self._count(STATUS_FAILED)

    @property
    def skipped(self) -> int:
        return self._count(STATUS_SKIPPED)

    def status_of(self, document_id: str) -> Optional[str]:
        for r in reversed(self.results):
            if r.document_id == document_id:
                return r.status
        return None

    def summary(self) -> str:
        lines = [
            f"Processed {len(self.results)} documents: "
            f"{self.succeeded} uploaded, {self.failed} failed, {self.skipped} skipped."
        ]
        for r in self.results:
            if r.status == STATUS_FAILED:
                lines.append(f"  - {r.document_id}: {ERRORS.get(r.code or '', r.code)} ({r.reason})")
        return "\n".join(lines)
