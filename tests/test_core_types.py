"""Tests for ammquote.core.types -- UtcDatetime and FrozenMap."""

from __future__ import annotations

import dataclasses
from datetime import UTC, datetime

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ammquote.core.result import Err, Ok, unwrap
from ammquote.core.types import FrozenMap, UtcDatetime


class TestUtcDatetime:
    def test_rejects_naive(self) -> None:
        with pytest.raises(TypeError):
            UtcDatetime(value=datetime(2024, 1, 1))

    def test_from_timestamp(self) -> None:
        assert UtcDatetime.from_timestamp(0).value == datetime(1970, 1, 1, tzinfo=UTC)


class TestFrozenMap:
    def test_sorted_by_key(self) -> None:
        fm = unwrap(FrozenMap.create({3: "c", 1: "a", 2: "b"}))
        assert list(fm) == [1, 2, 3]
        assert fm.values() == ("a", "b", "c")

    def test_lookup(self) -> None:
        fm = unwrap(FrozenMap.create([(1, "a"), (2, "b")]))
        assert fm[2] == "b"
        assert fm.get(5) is None
        assert 1 in fm
        assert 5 not in fm
        with pytest.raises(KeyError):
            fm[5]

    def test_duplicate_key_last_wins(self) -> None:
        fm = unwrap(FrozenMap.create([(1, "a"), (1, "b")]))
        assert fm[1] == "b"
        assert len(fm) == 1

    def test_incomparable_keys_err(self) -> None:
        assert isinstance(FrozenMap.create({1: "a", "x": "b"}), Err)

    def test_is_frozen_and_hashable(self) -> None:
        fm = unwrap(FrozenMap.create({1: "a"}))
        with pytest.raises(dataclasses.FrozenInstanceError):
            fm._entries = ()  # type: ignore[misc]
        assert hash(fm) == hash(unwrap(FrozenMap.create({1: "a"})))

    def test_empty(self) -> None:
        assert len(FrozenMap.EMPTY) == 0

    @given(st.dictionaries(st.integers(), st.integers()))
    def test_insertion_order_irrelevant(self, d: dict[int, int]) -> None:
        forward = FrozenMap.create(d)
        backward = FrozenMap.create(list(reversed(list(d.items()))))
        assert isinstance(forward, Ok)
        assert forward == backward
