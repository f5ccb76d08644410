"""Hashing helpers for deterministic staging checks."""

from __future__ import annotations

import hashlib
import json
from typing import Iterable, Sequence


def sha256_rows(columns: Sequence[str], rows: Iterable[Sequence[object]]) -> str:
    digest = hashlib.sha256()
    digest.update(json.dumps(list(columns), separators=(",", ":")).encode("utf-8"))
    for row in rows:
        digest.update(b"\n")
        digest.update(
            json.dumps(list(row), ensure_ascii=True, separators=(",", ":")).encode("utf-8")
        )
    return digest.hexdigest()
