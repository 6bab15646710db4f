"""
Gap Calculator Unit Tests
Tests for create4/plan/gap.py
"""
import pytest

from create4.plan.gap import (
    describe_gap_range,
    is_chain_id_in_gap,
    require_chain_id_in_gap,
)
from create4.schemas.encoding import UINT64_MAX
from create4.schemas.errors import GapException


class TestIsChainIdInGap:
    """Tests for the three gap cases."""

    def test_wrap_accepts_above_high_end(self):
        assert is_chain_id_in_gap(25, 1, 120)

    def test_wrap_rejects_inside_range(self):
        assert not is_chain_id_in_gap(25, 1, 20)

    def test_wrap_accepts_below_low_end(self):
        assert is_chain_id_in_gap(25, 10, 3)
        assert is_chain_id_in_gap(25, 10, 0)

    def test_wrap_rejects_endpoints(self):
        assert not is_chain_id_in_gap(25, 10, 25)
        assert not is_chain_id_in_gap(25, 10, 10)

    def test_open_interval(self):
        assert is_chain_id_in_gap(10, 25, 15)
        assert not is_chain_id_in_gap(10, 25, 10)
        assert not is_chain_id_in_gap(10, 25, 25)
        assert not is_chain_id_in_gap(10, 25, 120)

    def test_single_entry(self):
        assert is_chain_id_in_gap(5, 5, 6)
        assert is_chain_id_in_gap(5, 5, 0)
        assert not is_chain_id_in_gap(5, 5, 5)

    def test_accepts_string_ids(self):
        assert is_chain_id_in_gap("0x19", "1", "120")


class TestGapExhaustiveness:
    """Every chain id is either a leaf or in exactly one leaf's gap."""

    @pytest.mark.parametrize(
        "chain_ids",
        [
            [77],
            [10, 25],
            [1, 5, 137, 42161],
            [0, UINT64_MAX],
            [3, 4, 5],
        ],
    )
    def test_partition(self, chain_ids):
        ordered = sorted(chain_ids)
        leaves = [(cid, ordered[(i + 1) % len(ordered)]) for i, cid in enumerate(ordered)]
        targets = {0, 1, 2, 6, 11, 24, 26, 100, 2**63, UINT64_MAX - 1, UINT64_MAX}
        targets |= set(ordered)

        for target in targets:
            hits = sum(is_chain_id_in_gap(cid, nxt, target) for cid, nxt in leaves)
            if target in ordered:
                assert hits == 0, target
            else:
                assert hits == 1, target


class TestRequireChainIdInGap:
    """Tests for the raising variant."""

    def test_in_gap_returns_none(self):
        assert require_chain_id_in_gap(25, 10, 120) is None

    def test_out_of_gap_raises_with_context(self):
        with pytest.raises(GapException, match="chain 15 is not in the gap of leaf 25 -> 10") as exc:
            require_chain_id_in_gap(25, 10, 15)
        assert exc.value.code == "CHAIN_NOT_IN_GAP"
        assert exc.value.details == {
            "chain_id": "25",
            "next_chain_id": "10",
            "target_chain_id": "15",
        }


class TestDescribeGapRange:
    """Tests for human-readable gap descriptions."""

    def test_wrap_named(self):
        description = describe_gap_range(25, 1)
        assert "wrap gap" in description
        assert description == f"wrap gap: 26 <= target <= {UINT64_MAX} or target == 0"

    def test_single_entry_exclusion(self):
        description = describe_gap_range(5, 5)
        assert "target != 5" in description
        assert "single entry" in description

    def test_open_interval(self):
        assert describe_gap_range(10, 25) == "gap: 11 <= target <= 24"

    def test_one_id_gap(self):
        assert describe_gap_range(10, 12) == "gap: target == 11"

    def test_adjacent_ids(self):
        assert describe_gap_range(10, 11) == "gap: none (adjacent chain ids)"

    def test_wrap_with_lower_range(self):
        assert describe_gap_range(25, 10) == (
            f"wrap gap: 26 <= target <= {UINT64_MAX} or 0 <= target <= 9"
        )

    def test_wrap_at_top_of_range(self):
        assert describe_gap_range(UINT64_MAX - 1, 5) == (
            f"wrap gap: target == {UINT64_MAX} or 0 <= target <= 4"
        )

    def test_wrap_without_slack(self):
        assert describe_gap_range(UINT64_MAX, 0) == "gap: none (wrap leaf without slack)"
