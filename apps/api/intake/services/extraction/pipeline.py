"""Assistant text -> deduplicated extracted records (scan, parse, classify, dedupe)."""

from typing import Iterable, Iterator

from .records import ExtractedRecord, classify_payload, parse_payload, record_identity
from .scanner import iter_fenced_payloads


def iter_records(text: str | None) -> Iterator[ExtractedRecord]:
    """Classified records in document order; malformed or unknown blocks are skipped."""
    for raw in iter_fenced_payloads(text):
        payload = parse_payload(raw)
        if payload is None:
            continue
        record = classify_payload(payload)
        if record is not None:
            yield record


def dedupe_records(records: Iterable[ExtractedRecord]) -> Iterator[ExtractedRecord]:
    """Drop exact repeats of (kind, data), keeping first-seen order."""
    seen: set[str] = set()
    for record in records:
        key = record_identity(record)
        if key in seen:
            continue
        seen.add(key)
        yield record


def extract_records(text: str | None) -> list[ExtractedRecord]:
    return list(dedupe_records(iter_records(text)))
