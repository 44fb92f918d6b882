"""
receipts.py - Run Ledger Receipts

Every engine step leaves a receipt: an envelope (receipt_type, ts, tenant_id,
payload_hash) around the step's payload. A finished run is sealed with the
ledger root over the payload hashes of all its receipts.

Hashes are always dual (SHA256:BLAKE3).
"""

import hashlib
import json
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Union

import blake3

__all__ = [
    "RECEIPT_TYPES",
    "StopRule",
    "dual_hash",
    "payload_of",
    "emit_receipt",
    "verify_receipt",
    "write_receipt_jsonl",
    "ledger_root",
]

# =============================================================================
# RECEIPT TYPES
# =============================================================================

# In the order a run emits them
RECEIPT_TYPES = (
    "engine_init",
    "cycle_begin",
    "ingest",
    "state_update",
    "bias_update",
    "mutter",
    "inference",
    "instability",
    "aggregate",
    "resolution",
    "resolution_failure",
    "cycle_end",
    "run_complete",
)

ENVELOPE_FIELDS = frozenset({"receipt_type", "ts", "tenant_id", "payload_hash"})

EMPTY_LEDGER_SEED = b"termina:empty-ledger"


class StopRule(Exception):
    """Base of every stop raised by the engine or the ledger. Never catch silently."""
    pass


# =============================================================================
# HASHING
# =============================================================================

def dual_hash(data: Union[bytes, str]) -> str:
    """SHA256:BLAKE3 of data as "sha256_hex:blake3_hex". str is UTF-8 encoded."""
    raw = data.encode() if isinstance(data, str) else data
    return hashlib.sha256(raw).hexdigest() + ":" + blake3.blake3(raw).hexdigest()


def _canonical(payload: Dict[str, Any]) -> str:
    return json.dumps(payload, sort_keys=True, separators=(",", ":"), default=str)


def payload_of(receipt: Dict[str, Any]) -> Dict[str, Any]:
    """The receipt without its envelope fields."""
    return {k: v for k, v in receipt.items() if k not in ENVELOPE_FIELDS}


# =============================================================================
# EMISSION + VERIFICATION
# =============================================================================

def emit_receipt(receipt_type: str, payload: Dict[str, Any],
                 tenant_id: str = "termina") -> Dict[str, Any]:
    """
    Wrap one step's payload in a receipt envelope.

    Args:
        receipt_type: One of RECEIPT_TYPES
        payload: Step data; must not use envelope field names
        tenant_id: Tenant of the run that produced the step

    Returns:
        dict: envelope fields followed by the payload fields

    Raises:
        StopRule: unknown receipt_type, or payload shadows an envelope field
    """
    if receipt_type not in RECEIPT_TYPES:
        raise StopRule(f"Unknown receipt type: {receipt_type!r}")
    clashes = ENVELOPE_FIELDS & set(payload)
    if clashes:
        raise StopRule(f"Payload shadows envelope fields: {sorted(clashes)}")

    return {
        "receipt_type": receipt_type,
        "ts": datetime.now(timezone.utc).isoformat(),
        "tenant_id": tenant_id,
        "payload_hash": dual_hash(_canonical(payload)),
        **payload
    }


def verify_receipt(receipt: Dict[str, Any]) -> bool:
    """True if payload_hash still matches the receipt's payload."""
    return receipt.get("payload_hash") == dual_hash(_canonical(payload_of(receipt)))


def write_receipt_jsonl(receipt: Dict[str, Any], fh) -> None:
    """Append one receipt as a compact JSON line to an open text handle."""
    fh.write(json.dumps(receipt, separators=(",", ":"), default=str) + "\n")


# =============================================================================
# LEDGER ROOT
# =============================================================================

def ledger_root(receipts: Iterable[Dict[str, Any]]) -> str:
    """
    Root hash over a run's receipts, in ledger order.

    Leaves are the receipts' payload hashes, so timestamps do not affect the
    root. An odd level carries its last node up unpaired.
    """
    level: List[str] = [r["payload_hash"] for r in receipts]
    if not level:
        return dual_hash(EMPTY_LEDGER_SEED)
    while len(level) > 1:
        paired = [dual_hash(level[i] + level[i + 1]) for i in range(0, len(level) - 1, 2)]
        if len(level) % 2:
            paired.append(level[-1])
        level = paired
    return level[0]
