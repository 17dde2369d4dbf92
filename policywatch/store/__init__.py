"""Record store package.

Public re-exports so callers can write::

    from policywatch.store import RecordStore, Record
"""

from policywatch.store.models import AdmissionResult, ProcessingState, Record
from policywatch.store.records import RecordStore, StoreClosedError, fingerprint

__all__ = [
    "RecordStore",
    "StoreClosedError",
    "Record",
    "ProcessingState",
    "AdmissionResult",
    "fingerprint",
]
