"""
Unit tests for the pagination window
"""
import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from playpro_admin.core.pagination import ELLIPSIS, page_count, pagination_range


class TestPaginationRange:

    @pytest.mark.parametrize("current,total,expected", [
        (1, 1, [1]),
        (1, 3, [1, 2, 3]),
        (5, 10, [1, ELLIPSIS, 3, 4, 5, 6, 7, ELLIPSIS, 10]),
        (1, 10, [1, 2, 3, ELLIPSIS, 10]),
        (10, 10, [1, ELLIPSIS, 8, 9, 10]),
        (4, 7, [1, 2, 3, 4, 5, 6, 7]),
    ])
    def test_windows(self, current, total, expected):
        assert pagination_range(current, total) == expected

    def test_custom_delta(self):
        assert pagination_range(5, 10, delta=1) == [1, ELLIPSIS, 4, 5, 6, ELLIPSIS, 10]

    def test_out_of_range_current_is_clamped(self):
        assert pagination_range(99, 3) == [1, 2, 3]
        assert pagination_range(0, 3) == [1, 2, 3]

    def test_first_and_last_always_present_without_duplicates(self):
        for total in range(1, 15):
            for current in range(1, total + 1):
                window = pagination_range(current, total)
                numbers = [m for m in window if m != ELLIPSIS]
                assert numbers[0] == 1
                assert numbers[-1] == total
                assert len(numbers) == len(set(numbers))
                assert current in numbers


class TestPageCount:

    def test_never_below_one(self):
        assert page_count(0, 10) == 1

    def test_rounds_up(self):
        assert page_count(10, 10) == 1
        assert page_count(11, 10) == 2
        assert page_count(95, 10) == 10


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
