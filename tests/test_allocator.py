"""
Tests for the allocator module.

This module contains unit tests for the Quick Fit allocation algorithm.
"""

import threading

import pytest
from quickfit.allocator import QuickFitAllocator
from quickfit.errors import ConfigurationError
from quickfit.models import AllocatorConfig, CategoryStatus, Outcome


CATEGORIES = (50, 100, 200, 300, 500)


@pytest.fixture
def allocator():
    return QuickFitAllocator(CATEGORIES, 5)


class TestConstruction:
    """Test cases for allocator construction and validation."""

    def test_initial_pools(self, allocator):
        """Every category starts with the initial free count."""
        assert allocator.categories == CATEGORIES
        assert allocator.initial_free_count == 5
        assert all(entry.free_count == 5 for entry in allocator.status())
        assert allocator.total_free_blocks() == 25

    def test_from_default_config(self):
        allocator = QuickFitAllocator.from_config(AllocatorConfig())
        assert allocator.categories == CATEGORIES
        assert allocator.initial_free_count == 5

    def test_unsorted_categories_are_sorted(self):
        allocator = QuickFitAllocator([300, 50, 100], 2)
        assert allocator.categories == (50, 100, 300)

    @pytest.mark.parametrize("categories", [
        [],
        [50, 0, 100],
        [50, -10],
        [50, 100, 50],
        [50, 2.5],
        [50, True],
    ])
    def test_invalid_categories(self, categories):
        """Empty, non-positive, duplicate or non-integer sizes are rejected."""
        with pytest.raises(ConfigurationError):
            QuickFitAllocator(categories, 5)

    def test_negative_initial_count(self):
        with pytest.raises(ConfigurationError):
            QuickFitAllocator(CATEGORIES, -1)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            QuickFitAllocator([], 5)


class TestAllocate:
    """Test cases for allocate()."""

    def test_selects_smallest_fitting_category(self, allocator):
        """A request of 120 skips 50 and 100 and lands in 200."""
        result = allocator.allocate(120)

        assert result.ok
        assert result.outcome is Outcome.SUCCESS
        assert result.category == 200
        assert allocator.free_count(200) == 4
        assert allocator.free_count(100) == 5

    def test_exact_size_fits(self, allocator):
        assert allocator.allocate(100).category == 100
        assert allocator.allocate(1).category == 50

    def test_larger_than_every_category_fails(self, allocator):
        """A request of 600 exceeds the largest category (500)."""
        before = allocator.status()
        result = allocator.allocate(600)

        assert not result.ok
        assert result.outcome is Outcome.ALLOCATION_FAILURE
        assert result.category is None
        assert allocator.status() == before

    def test_depleted_category_falls_through(self, allocator):
        """After 5 allocations of 50, the 6th is served by category 100."""
        for _ in range(5):
            assert allocator.allocate(50).category == 50
        assert allocator.free_count(50) == 0

        result = allocator.allocate(50)
        assert result.category == 100
        assert allocator.free_count(100) == 4

    def test_all_categories_exhausted(self, allocator):
        for _ in range(25):
            assert allocator.allocate(10).ok

        result = allocator.allocate(10)
        assert result.outcome is Outcome.ALLOCATION_FAILURE
        assert all(entry.free_count == 0 for entry in allocator.status())

    def test_larger_category_exhausted_fails(self, allocator):
        """Smaller pools with capacity cannot absorb a request they cannot hold."""
        for _ in range(5):
            allocator.allocate(500)

        assert not allocator.allocate(450).ok
        assert allocator.free_count(50) == 5

    def test_internal_fragmentation(self, allocator):
        assert allocator.allocate(120).internal_fragmentation == 80
        assert allocator.allocate(600).internal_fragmentation == 0

    @pytest.mark.parametrize("size", [0, -5])
    def test_non_positive_request(self, allocator, size):
        with pytest.raises(ValueError):
            allocator.allocate(size)

    def test_free_count_never_negative(self, allocator):
        for size in [10, 60, 150, 250, 400] * 10:
            allocator.allocate(size)
        assert all(entry.free_count >= 0 for entry in allocator.status())


class TestDeallocate:
    """Test cases for deallocate()."""

    def test_known_category_increments(self, allocator):
        allocator.allocate(120)
        result = allocator.deallocate(200)

        assert result.ok
        assert result.outcome is Outcome.SUCCESS
        assert allocator.free_count(200) == 5

    def test_can_exceed_initial_count(self, allocator):
        """Deallocation does not check for an outstanding allocation."""
        assert allocator.deallocate(300).ok
        assert allocator.deallocate(300).ok
        assert allocator.free_count(300) == 7

    def test_unknown_category(self, allocator):
        """75 is not a configured size: no partial matching, no state change."""
        before = allocator.status()
        result = allocator.deallocate(75)

        assert not result.ok
        assert result.outcome is Outcome.UNKNOWN_CATEGORY
        assert allocator.status() == before

    def test_non_positive_block(self, allocator):
        with pytest.raises(ValueError):
            allocator.deallocate(0)

    def test_free_count_unknown_size(self, allocator):
        with pytest.raises(KeyError):
            allocator.free_count(75)


class TestResetAndStatus:
    """Test cases for reset() and status()."""

    def test_reset_restores_initial_counts(self, allocator):
        for size in (10, 10, 120, 450):
            allocator.allocate(size)
        allocator.deallocate(300)
        allocator.deallocate(300)

        allocator.reset()

        assert [entry.free_count for entry in allocator.status()] == [5] * 5

    def test_status_rows(self, allocator):
        for _ in range(5):
            allocator.allocate(500)

        status = allocator.status()
        assert [entry.size for entry in status] == list(CATEGORIES)
        assert status[-1] == CategoryStatus(500, 0)
        assert not status[-1].is_free
        assert status[0].is_free

    def test_status_is_idempotent(self, allocator):
        allocator.allocate(70)
        assert allocator.status() == allocator.status()

    def test_zero_initial_count(self):
        allocator = QuickFitAllocator([64], 0)
        assert not allocator.allocate(10).ok
        assert allocator.deallocate(64).ok
        assert allocator.allocate(10).category == 64


class TestConcurrency:
    """The lock keeps concurrent allocations from consuming the same slot."""

    def test_parallel_allocations_never_oversubscribe(self):
        allocator = QuickFitAllocator([100], 50)
        results = []

        def worker():
            for _ in range(20):
                results.append(allocator.allocate(10).ok)

        threads = [threading.Thread(target=worker) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert results.count(True) == 50
        assert allocator.free_count(100) == 0
