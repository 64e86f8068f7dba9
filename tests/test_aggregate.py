"""Tests for the all-or-nothing aggregator."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from fanjoin import Err, Ok, collect, combined_success
from tests.strategies import errors, ok_lists, outcome_lists, values


class ApiError(Exception):
    pass


class TestCombinedSuccess:
    """Tests for combined_success() at the fixed arities."""

    def test_two_successes(self):
        assert combined_success(Ok('profile'), Ok('balance')) == Ok(('profile', 'balance'))

    def test_three_successes(self):
        assert combined_success(Ok(1), Ok('two'), Ok(3.0)) == Ok((1, 'two', 3.0))

    def test_four_successes(self):
        result = combined_success(Ok('A'), Ok('B'), Ok('C'), Ok('D'))
        assert result == Ok(('A', 'B', 'C', 'D'))

    def test_single_operand(self):
        assert combined_success(Ok('only')) == Ok(('only',))

    def test_failure_at_second_position(self):
        error = ApiError('balance unavailable')
        result = combined_success(Ok('A'), Err(error), Ok('C'), Ok('D'))
        assert result.is_err()
        assert result.error is error

    def test_first_failure_wins(self):
        assert combined_success(Err('E1'), Err('E2')) == Err('E1')

    def test_later_operands_not_inspected(self):
        """Operands after the first Err are never validated."""
        assert combined_success(Err('E'), 'not an outcome') == Err('E')  # type: ignore[call-overload]

    def test_success_values_keep_positional_identity(self):
        nested = (1, 2)
        result = combined_success(Ok(nested), Ok(None))
        assert result == Ok(((1, 2), None))

    def test_no_operands_raises(self):
        with pytest.raises(ValueError, match='at least one'):
            combined_success()

    def test_non_outcome_operand_raises(self):
        with pytest.raises(TypeError):
            combined_success(Ok(1), 2)  # type: ignore[call-overload]


class TestCollect:
    """Tests for collect() over dynamic-length iterables."""

    def test_list_of_successes(self):
        assert collect([Ok(1), Ok(2), Ok(3)]) == Ok((1, 2, 3))

    def test_empty_iterable(self):
        assert collect([]) == Ok(())

    def test_stops_consuming_at_first_err(self):
        consumed: list[int] = []

        def gen():
            for i, outcome in enumerate([Ok(1), Err('fail'), Ok(3)]):
                consumed.append(i)
                yield outcome

        assert collect(gen()) == Err('fail')
        assert consumed == [0, 1]


@pytest.mark.hypothesis_property
class TestAggregationProperties:
    """Property-based tests for the reduction rule."""

    @given(ok_lists())
    def test_all_ok_gives_ordered_tuple(self, oks):
        assert combined_success(*oks) == Ok(tuple(o.value for o in oks))

    @given(outcome_lists())
    def test_result_is_first_err_or_all_values(self, outcomes):
        result = collect(outcomes)
        failures = [o for o in outcomes if o.is_err()]
        if failures:
            assert result == failures[0]
        else:
            assert result == Ok(tuple(o.value for o in outcomes))

    @given(ok_lists(min_size=1, max_size=6), st.data(), errors)
    def test_single_failure_position_decides(self, oks, data, error):
        position = data.draw(st.integers(min_value=0, max_value=len(oks) - 1))
        outcomes = list(oks)
        outcomes[position] = Err(error)
        assert combined_success(*outcomes) == Err(error)

    @given(outcome_lists(max_size=4), outcome_lists(max_size=4))
    def test_nesting_matches_flattening(self, left, right):
        """Aggregating two aggregates agrees with aggregating the concatenation."""
        nested = combined_success(collect(left), collect(right))
        flat = collect(left + right)
        if flat.is_err():
            assert nested == flat
        else:
            assert nested.map(lambda pair: pair[0] + pair[1]) == flat

    @given(values, values)
    def test_matches_pairwise_zip(self, a, b):
        assert combined_success(Ok(a), Ok(b)) == Ok(a).zip(Ok(b))
