"""Unit tests for the Result type."""

import pytest

from dsdiff.core.result import Err, Ok, and_then, map_ok


class TestResult:
    def test_ok(self):
        result = Ok(3)
        assert result.is_ok() and not result.is_err()
        assert result.unwrap() == 3

    def test_err_unwrap_raises(self):
        result = Err("bad")
        assert result.is_err()
        with pytest.raises(ValueError, match="bad"):
            result.unwrap()

    def test_map_ok(self):
        assert map_ok(Ok(2), lambda v: v * 2) == Ok(4)
        assert map_ok(Err("e"), lambda v: v * 2) == Err("e")

    def test_and_then(self):
        assert and_then(Ok(2), lambda v: Ok(v + 1)) == Ok(3)
        assert and_then(Ok(2), lambda v: Err("no")) == Err("no")
        assert and_then(Err("first"), lambda v: Ok(v)) == Err("first")
