"""Tests for sshd Match block synthesis."""

from __future__ import annotations

import dataclasses

import pytest

from sshgrant.match import DEFAULT_POSITION, MatchBlock, synthesize
from sshgrant.rules import Criteria


class TestSynthesize:
    """Tests for MatchBlockSynthesizer."""

    # Test: both buckets produce Host then Address
    def test_host_before_address(self) -> None:
        """A name and an address give two blocks, Host first."""
        params = {"AllowUsers": ["a"]}
        blocks = synthesize(["h1.example"], ["10.0.0.1"], params)
        assert [b.criteria for b in blocks] == [Criteria.HOST, Criteria.ADDRESS]
        assert [b.pattern for b in blocks] == ["h1.example", "10.0.0.1"]
        assert all(b.parameters == params for b in blocks)

    # Test: parameters are independent copies
    def test_parameters_are_independent_copies(self) -> None:
        """Editing one block's parameters leaves the other and the source alone."""
        params = {"AllowUsers": ["a"]}
        host, address = synthesize(["h1.example"], ["10.0.0.1"], params)
        host.parameters["AllowUsers"].append("b")
        host.parameters["Banner"] = "none"
        assert address.parameters == {"AllowUsers": ["a"]}
        assert params == {"AllowUsers": ["a"]}

    # Test: pattern joins in order without dedup
    def test_pattern_joins_without_dedup(self) -> None:
        """Entries are comma-joined in order, repeats included."""
        (block,) = synthesize(["a.corp", "b.corp", "a.corp"], [], {})
        assert block.pattern == "a.corp,b.corp,a.corp"

    # Test: only addresses
    def test_only_addresses(self) -> None:
        """No names means a single Address block."""
        blocks = synthesize([], ["10.0.0.1", "10.0.0.2"], {})
        assert len(blocks) == 1
        assert blocks[0].criteria is Criteria.ADDRESS
        assert blocks[0].pattern == "10.0.0.1,10.0.0.2"

    # Test: nothing to match
    def test_empty_buckets(self) -> None:
        """Two empty buckets give zero blocks."""
        assert synthesize([], [], {"X": "y"}) == []

    # Test: shared anchor position
    def test_blocks_share_position(self) -> None:
        """All blocks from one run carry the same anchor."""
        blocks = synthesize(["a"], ["1"], {}, position="after Match User root")
        assert {b.position for b in blocks} == {"after Match User root"}
        assert synthesize(["a"], [], {})[0].position == DEFAULT_POSITION


class TestMatchBlock:
    """Tests for the MatchBlock descriptor."""

    # Test: key is "criteria pattern"
    def test_key(self) -> None:
        """The match key combines criteria and pattern."""
        block = MatchBlock(Criteria.ADDRESS, "10.0.0.1,10.0.0.2")
        assert block.key == "Address 10.0.0.1,10.0.0.2"

    # Test: block is frozen
    def test_frozen(self) -> None:
        """Block fields cannot be reassigned after creation."""
        block = MatchBlock(Criteria.HOST, "a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            block.pattern = "b"  # type: ignore[misc]
