"""Tests for the in-place patch engine."""

import io

import pytest

from bl2patch.exceptions import PatchWriteError
from bl2patch.patching import Change, Direction, apply_changes, check_changes

CHANGES = (
    Change(5, b"\xaa\xbb", b"\x11\x22"),
    Change(40, b"\xcc", b"\x33"),
    Change(20, b"\xdd\xee\xff", b"\x44\x55\x66"),
)


def _pristine() -> bytearray:
    data = bytearray(64)
    for change in CHANGES:
        data[change.offset:change.end] = change.original
    return data


class _FailingWrites(io.BytesIO):
    def __init__(self, data: bytes, fail_on_call: int):
        super().__init__(data)
        self._calls = 0
        self._fail_on_call = fail_on_call

    def write(self, data):
        self._calls += 1
        if self._calls == self._fail_on_call:
            raise OSError("no space left on device")
        return super().write(data)


def test_forward_writes_patch_bytes_only_at_offsets():
    pristine = _pristine()
    handle = io.BytesIO(bytes(pristine))
    assert apply_changes(handle, CHANGES, Direction.FORWARD) == 3

    result = bytearray(handle.getvalue())
    assert len(result) == len(pristine)
    expected = bytearray(pristine)
    for change in CHANGES:
        expected[change.offset:change.end] = change.patch
    assert result == expected


def test_reverse_restores_original_bytes():
    pristine = _pristine()
    handle = io.BytesIO(bytes(pristine))
    apply_changes(handle, CHANGES, Direction.FORWARD)
    apply_changes(handle, CHANGES, Direction.REVERSE)
    assert handle.getvalue() == bytes(pristine)


def test_write_failure_reports_committed_changes():
    pristine = _pristine()
    handle = _FailingWrites(bytes(pristine), fail_on_call=2)
    with pytest.raises(PatchWriteError) as excinfo:
        apply_changes(handle, CHANGES, Direction.FORWARD)

    error = excinfo.value
    assert error.committed == 1
    assert error.total == 3
    assert error.details["offset"] == "0x00000028"
    assert "restore" in error.restore_hint()

    # first change landed, the rest did not: mixed state
    data = handle.getvalue()
    assert data[5:7] == b"\x11\x22"
    assert data[40:41] == b"\xcc"


def test_check_changes_empty_when_bytes_match():
    handle = io.BytesIO(bytes(_pristine()))
    assert check_changes(handle, CHANGES, Direction.FORWARD) == []
    # the pristine file is not a valid source for reverting
    assert len(check_changes(handle, CHANGES, Direction.REVERSE)) == 3


def test_check_changes_reports_mismatch_without_writing():
    pristine = _pristine()
    pristine[40] = 0x00
    handle = io.BytesIO(bytes(pristine))
    assert check_changes(handle, CHANGES, Direction.FORWARD) == [CHANGES[1]]
    assert handle.getvalue() == bytes(pristine)


def test_direction_properties():
    assert Direction.FORWARD.forward
    assert not Direction.REVERSE.forward
    assert Direction.FORWARD.verb == "apply"
    assert Direction.REVERSE.verb == "revert"
