import pytest
from seqops.ops import (
    all_match,
    any_match,
    batch,
    clamp,
    filter_values,
    first,
    if_else,
    limit,
    map_indexed,
    map_values,
    reduce,
    to_opaque_slice,
)


def is_even(x):
    return x % 2 == 0


class TestScalarHelpers:
    """Test clamp and if_else"""

    def test_clamp_within_range(self):
        assert clamp(5, 0, 10) == 5

    def test_clamp_below_and_above(self):
        """Test values outside the bounds snap to the nearest bound"""
        assert clamp(-1, 0, 10) == 0, "Below min should clamp to min"
        assert clamp(11, 0, 10) == 10, "Above max should clamp to max"

    def test_clamp_on_bounds_and_other_types(self):
        assert clamp(0, 0, 10) == 0
        assert clamp(10, 0, 10) == 10
        assert clamp(2.5, 0.0, 1.0) == 1.0
        assert clamp("m", "a", "k") == "k"

    def test_if_else(self):
        assert if_else(True, 1, 2) == 1
        assert if_else(False, 1, 2) == 2
        assert if_else(1 > 2, "yes", "no") == "no"


class TestLimit:
    """Test prefix extraction"""

    def test_limit_shorter_than_input(self):
        data = [1, 2, 3]
        assert limit(data, 2) == [1, 2]

    def test_limit_beyond_length(self):
        data = [1, 2, 3]
        assert limit(data, 5) == [1, 2, 3]

    def test_limit_empty_and_non_positive(self):
        assert limit([], 3) == []
        assert limit([1, 2, 3], 0) == []
        assert limit([1, 2, 3], -2) == [], "Negative n should give an empty result"

    def test_limit_length_property(self):
        data = list(range(10))
        for n in range(-3, 15):
            result = limit(data, n)
            assert len(result) == min(max(n, 0), len(data))
            assert result == data[:len(result)], f"Result for n={n} should be a prefix"

    def test_limit_does_not_mutate(self):
        data = [1, 2, 3]
        result = limit(data, 2)
        result.append(99)
        assert data == [1, 2, 3]

    def test_limit_returns_list_for_other_sequences(self):
        data = [1, 2, 3, 4]
        assert limit(data, 4) is not data, "Full-length limit should still be a copy"
        assert limit((1, 2, 3), 2) == [1, 2]
        assert limit("abc", 2) == ["a", "b"]


class TestMap:
    """Test allocating transformations"""

    def test_map_values(self):
        data = [1, 2, 3]
        result = map_values(data, lambda v: v * v)
        assert result == [1, 4, 9]
        assert data == [1, 2, 3], "Original list should be unchanged"
        assert result is not data

    def test_map_changes_type(self):
        assert map_values([1, 2, 3], str) == ["1", "2", "3"]

    def test_map_applies_in_index_order(self):
        calls = []

        def track(x):
            calls.append(x)
            return x

        map_values([3, 1, 2], track)
        assert calls == [3, 1, 2]

    def test_map_indexed(self):
        data = ["a", "b", "c"]
        result = map_indexed(data, lambda i, v: v + str(i))
        assert result == ["a0", "b1", "c2"]

    def test_map_empty(self):
        assert map_values([], lambda x: x) == []
        assert map_indexed([], lambda i, x: x) == []


class TestFilter:
    """Test the allocating filter"""

    def test_filter_values(self):
        data = [1, 2, 3, 4, 5]
        result = filter_values(data, is_even)
        assert result == [2, 4]
        assert data == [1, 2, 3, 4, 5], "Original list should be unchanged"

    def test_filter_nothing_matches(self):
        assert filter_values([1, 3, 5], is_even) == []

    def test_filter_keeps_none_values(self):
        data = [1, None, 3, None]
        assert filter_values(data, lambda x: x is None) == [None, None]


class TestReduce:
    """Test left folds"""

    def test_sum_and_product(self):
        data = [1, 2, 3, 4]
        assert reduce(data, 0, lambda acc, v: acc + v) == 10
        assert reduce(data, 1, lambda acc, v: acc * v) == 24

    def test_empty_returns_initial(self):
        marker = object()
        assert reduce([], marker, lambda acc, v: acc) is marker

    def test_fold_is_left_to_right(self):
        result = reduce(["a", "b", "c"], "", lambda acc, v: acc + v)
        assert result == "abc"

    def test_accumulator_type_differs(self):
        counts = reduce(["x", "y", "x"], {}, lambda acc, v: {**acc, v: acc.get(v, 0) + 1})
        assert counts == {"x": 2, "y": 1}


class TestAnyAll:
    """Test predicates over the whole sequence"""

    def test_any_all(self):
        data = [1, 3, 5]
        assert any_match(data, is_even) is False
        assert all_match(data, lambda v: v % 2 == 1) is True

        data.append(4)
        assert any_match(data, is_even) is True
        assert all_match(data, lambda v: v % 2 == 1) is False

    def test_empty_sequence(self):
        assert all_match([], is_even) is True, "all over empty should be vacuously true"
        assert any_match([], is_even) is False

    def test_short_circuit(self):
        seen = []

        def track(x):
            seen.append(x)
            return x > 1

        assert any_match([1, 2, 3, 4], track) is True
        assert seen == [1, 2], "any should stop at the first match"

        seen.clear()
        assert all_match([3, 1, 5], track) is False
        assert seen == [3, 1], "all should stop at the first failure"

    def test_de_morgan(self):
        for data in ([1, 2, 3], [1, 3], [2, 4], [7]):
            assert any_match(data, is_even) == (not all_match(data, lambda x: not is_even(x)))


class TestFirst:
    """Test first-match search"""

    def test_first_found(self):
        assert first([5, 7, 9, 10], is_even) == (10, True)

    def test_first_not_found(self):
        assert first([5, 7, 9], is_even) == (None, False)
        assert first([5, 7, 9], is_even, default=0) == (0, False)

    def test_first_returns_earliest_match(self):
        assert first([1, 4, 6, 8], is_even) == (4, True)

    def test_first_match_can_be_falsy(self):
        value, found = first([1, 0, 3], lambda x: x == 0)
        assert found is True
        assert value == 0


class TestBatch:
    """Test chunking"""

    def test_typical(self):
        data = [1, 2, 3, 4, 5, 6, 7]
        assert batch(data, 3) == [[1, 2, 3], [4, 5, 6], [7]]

    def test_size_larger_than_input(self):
        data = [1, 2, 3, 4, 5, 6, 7]
        assert batch(data, 10) == [[1, 2, 3, 4, 5, 6, 7]]

    def test_exact_multiple(self):
        assert batch([1, 2, 3, 4], 2) == [[1, 2], [3, 4]]

    @pytest.mark.parametrize("size", [0, -1, -100])
    def test_non_positive_size(self, size):
        assert batch([1, 2, 3], size) == [], f"Batch size {size} should give no chunks"

    def test_empty_input(self):
        assert batch([], 3) == []

    def test_input_unchanged(self):
        data = [1, 2, 3, 4, 5]
        chunks = batch(data, 2)
        chunks[0].append(99)
        assert data == [1, 2, 3, 4, 5]


class TestOpaqueSlice:
    """Test variadic packing"""

    def test_empty(self):
        assert to_opaque_slice() == []

    def test_mixed_types(self):
        result = to_opaque_slice(1, "a", True)
        assert len(result) == 3
        assert isinstance(result[1], str)
        assert result[1] == "a"
        assert result == [1, "a", True]

    def test_preserves_nested_values(self):
        inner = [1, 2]
        result = to_opaque_slice(inner, None)
        assert result[0] is inner
        assert result[1] is None


class TestCallableErrors:
    """Errors raised by callables are not swallowed"""

    def test_predicate_error_propagates(self):
        def boom(x):
            raise RuntimeError("bad predicate")

        with pytest.raises(RuntimeError, match="bad predicate"):
            filter_values([1], boom)
        with pytest.raises(RuntimeError):
            first([1], boom)
