"""Monitor endpoints — record ingestion from the browser extension.

Routes
------
POST /monitor            Body: {"url", "loginDetected", "policyLinks"}  → monitor
GET  /monitor/records    Every accepted record and its state           → list_records
"""

from __future__ import annotations

from typing import Any, List

from fastapi import APIRouter, Request
from pydantic import BaseModel, ConfigDict, Field

from policywatch.config import settings
from policywatch.store.models import AdmissionResult, Record
from policywatch.store.records import RecordStore

router = APIRouter()


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class MonitorRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    url: str
    login_detected: bool = Field(False, alias="loginDetected")
    policy_links: List[str] = Field(default_factory=list, alias="policyLinks")


class MonitorResponse(BaseModel):
    status: str


class RecordView(BaseModel):
    id: str
    url: str
    loginDetected: bool
    policyLinks: List[str]
    state: str
    extractedText: str
    receivedAt: int


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _print_records(title: str, records: List[Record]) -> None:
    print(f"\n=== {title} ===")
    for i, item in enumerate(records, start=1):
        print(f"Item {i}:")
        print(f"  URL: {item.source_url}")
        print(f"  Has Login Form: {item.login_detected}")
        print(f"  State: {item.state.value}")
        print(f"  Text Policy: {item.extracted_text[:200]!r}")
        print("  Policy Links:")
        for link in item.policy_links:
            print(f"    - {link}")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("", response_model=MonitorResponse)
def monitor(body: MonitorRequest, request: Request) -> dict[str, Any]:
    """Admit an observed page and scrape its policy links if they are new.

    Runs one scrape pass inline before answering; the response never
    reflects whether individual links could be scraped.
    """
    store: RecordStore = request.app.state.store
    record = Record.from_observation(body.url, body.login_detected, body.policy_links)

    if store.admit(record) is AdmissionResult.DUPLICATE_REJECTED:
        print("[MONITOR] Duplicate policies ignored")
        return {"status": "duplicate policies ignored"}

    print(f"[MONITOR] Received {record.source_url} ({len(record.policy_links)} policy link(s))")
    if record.policy_links:
        request.app.state.orchestrator.run_pass()
        if settings.verbose_store_dump:
            _print_records("Non-Empty Policy Queue (After Scraping)", store.pending())

    if settings.verbose_store_dump:
        _print_records("Current Records", store.records())

    return {"status": "received"}


@router.get("/records", response_model=List[RecordView])
def list_records(request: Request) -> List[dict[str, Any]]:
    """Return every accepted record, oldest first."""
    store: RecordStore = request.app.state.store
    return [record.to_dict() for record in store.records()]
