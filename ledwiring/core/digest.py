from __future__ import annotations

import hashlib
import json
from typing import Any

PLAN_DIGEST_VERSION = 1


def _canonical_json(data: Any) -> bytes:
    return json.dumps(data, sort_keys=True, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def plan_digest(plan) -> str:
    """Content hash of a WallPlan: equal inputs must give equal digests."""
    from ..export import plan_to_dict

    payload = b"plan\0" + str(PLAN_DIGEST_VERSION).encode("ascii") + b"\0" + _canonical_json(plan_to_dict(plan))
    return _sha256_hex(payload)
