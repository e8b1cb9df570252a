import pytest

from comfybench.util import is_nextest, known_parallelism, slice_middle


@pytest.mark.parametrize(
    "seq, expected",
    [
        ([], []),
        ([1], [1]),
        ([1, 2], [1, 2]),
        ([1, 2, 3], [2]),
        ([1, 2, 3, 4], [2, 3]),
        ([1, 2, 3, 4, 5], [3]),
    ],
)
def test_slice_middle(seq, expected):
    assert slice_middle(seq) == expected


def test_slice_middle_tuple():
    assert slice_middle((10, 20, 30, 40)) == (20, 30)


def test_known_parallelism_is_stable():
    first = known_parallelism()
    assert first == known_parallelism()
    assert first >= 1


def test_is_nextest_set(monkeypatch):
    monkeypatch.setenv("NEXTEST", "1")
    assert is_nextest() is True


def test_is_nextest_other_value(monkeypatch):
    monkeypatch.setenv("NEXTEST", "0")
    assert is_nextest() is False


def test_is_nextest_unset(monkeypatch):
    monkeypatch.delenv("NEXTEST", raising=False)
    assert is_nextest() is False