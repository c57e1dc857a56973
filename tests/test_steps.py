"""Tests for step ranges."""

import pytest

from mdstream.analysis import StepRange


class TestStepRangeParsing:
    """Test parsing of step range strings."""

    def test_full(self):
        """Test parsing start, end and stride."""
        assert StepRange.parse("2:10:3") == StepRange(2, 10, 3)

    def test_without_stride(self):
        """Test parsing start and end only."""
        assert StepRange.parse("5:20") == StepRange(5, 20, 1)

    def test_optional_fields(self):
        """Test that every field can be omitted."""
        assert StepRange.parse(":") == StepRange()
        assert StepRange.parse("10:") == StepRange(start=10)
        assert StepRange.parse(":50") == StepRange(end=50)
        assert StepRange.parse("::5") == StepRange(stride=5)

    @pytest.mark.parametrize("string", ["5", "1:2:3:4", "a:5", "1:b", "1:5:c", ""])
    def test_malformed(self, string):
        """Test that malformed strings raise errors."""
        with pytest.raises(ValueError):
            StepRange.parse(string)

    def test_invalid_values(self):
        """Test that inconsistent ranges raise errors."""
        with pytest.raises(ValueError):
            StepRange.parse("10:5")
        with pytest.raises(ValueError):
            StepRange.parse("::0")
        with pytest.raises(ValueError):
            StepRange(start=-1)


class TestStepRangeVisit:
    """Test the visited steps."""

    def test_stride(self):
        """Test visiting with a stride."""
        assert list(StepRange.parse("2:10:3").visit(100)) == [2, 5, 8]

    def test_end_is_inclusive(self):
        """Test that the end step is visited."""
        assert list(StepRange(0, 4, 2).visit(100)) == [0, 2, 4]

    def test_end_past_trajectory(self):
        """Test that steps past the end of the trajectory are not visited."""
        assert list(StepRange(3, 100).visit(6)) == [3, 4, 5]

    def test_default_visits_all(self):
        """Test that the default range visits every step."""
        assert list(StepRange().visit(4)) == [0, 1, 2, 3]

    def test_start_past_trajectory(self):
        """Test that nothing is visited when start is after the last step."""
        assert list(StepRange(start=10).visit(5)) == []

    def test_contains(self):
        """Test step membership."""
        steps = StepRange(2, 10, 3)
        assert 2 in steps
        assert 8 in steps
        assert 3 not in steps
        assert 11 not in steps
        assert 1 not in steps

    def test_contains_matches_visit(self):
        """Test that membership and iteration agree."""
        steps = StepRange(1, 17, 4)
        visited = set(steps.visit(30))
        assert visited == {step for step in range(30) if step in steps}

    def test_as_slice(self):
        """Test conversion to a slice."""
        assert StepRange(2, 10, 3).as_slice(100) == (2, 11, 3)
        assert StepRange().as_slice(7) == (0, 7, 1)
        assert StepRange(start=10).as_slice(5) == (5, 5, 1)
