"""
Gap Calculator

A chain leaf authorizes fallback deployment on every chain id strictly
between its own chain id and its successor's, in cyclic order. Three cases,
exhaustive and mutually exclusive:

- chainId == nextChainId  single-entry plan, gap = every id except chainId
- chainId <  nextChainId  open interval (chainId, nextChainId)
- chainId >  nextChainId  wrap leaf (last in sort order):
                          ids above chainId or below nextChainId
"""

from __future__ import annotations

from typing import Any

from create4.schemas.encoding import UINT64_MAX, normalize_chain_id
from create4.schemas.errors import GapException


def is_chain_id_in_gap(chain_id: Any, next_chain_id: Any, target_chain_id: Any) -> bool:
    """
    Return True if target_chain_id may use the fallback under this leaf.

    All three ids accept any representation normalize_chain_id accepts.
    """
    cid = normalize_chain_id(chain_id, "chain id")
    nxt = normalize_chain_id(next_chain_id, "next chain id")
    target = normalize_chain_id(target_chain_id, "target chain id")

    if cid == nxt:
        # Single-entry plan: all other chain ids map to fallback.
        return target != cid
    if cid < nxt:
        return cid < target < nxt
    return target > cid or target < nxt


def require_chain_id_in_gap(chain_id: Any, next_chain_id: Any, target_chain_id: Any) -> None:
    """
    Raise GapException unless target_chain_id lies in the leaf's gap.

    A rejection here is a legitimate answer, not a malfunction: the target
    chain cannot use the fallback through this leaf.
    """
    if not is_chain_id_in_gap(chain_id, next_chain_id, target_chain_id):
        cid = normalize_chain_id(chain_id, "chain id")
        nxt = normalize_chain_id(next_chain_id, "next chain id")
        target = normalize_chain_id(target_chain_id, "target chain id")
        raise GapException(
            f"chain {target} is not in the gap of leaf {cid} -> {nxt} "
            f"({describe_gap_range(cid, nxt)})",
            chain_id=cid,
            next_chain_id=nxt,
            target_chain_id=target,
        )


def describe_gap_range(chain_id: Any, next_chain_id: Any) -> str:
    """
    Describe a leaf's gap for diagnostics.

    Examples:
        >>> describe_gap_range(5, 5)
        'gap: target != 5 (single entry plan)'
        >>> describe_gap_range(10, 25)
        'gap: 11 <= target <= 24'
        >>> describe_gap_range(25, 1)
        'wrap gap: 26 <= target <= 18446744073709551615 or target == 0'
    """
    cid = normalize_chain_id(chain_id, "chain id")
    nxt = normalize_chain_id(next_chain_id, "next chain id")

    if cid == nxt:
        return f"gap: target != {cid} (single entry plan)"

    if cid < nxt:
        start = cid + 1
        end = nxt - 1
        if start > end:
            return "gap: none (adjacent chain ids)"
        if start == end:
            return f"gap: target == {start}"
        return f"gap: {start} <= target <= {end}"

    segments: list[str] = []
    if cid < UINT64_MAX:
        start = cid + 1
        if start == UINT64_MAX:
            segments.append(f"target == {start}")
        else:
            segments.append(f"{start} <= target <= {UINT64_MAX}")
    if nxt > 0:
        end = nxt - 1
        segments.append("target == 0" if end == 0 else f"0 <= target <= {end}")

    if not segments:
        return "gap: none (wrap leaf without slack)"
    return "wrap gap: " + " or ".join(segments)


__all__ = [
    "is_chain_id_in_gap",
    "require_chain_id_in_gap",
    "describe_gap_range",
]
