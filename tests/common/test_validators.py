from __future__ import annotations

import json

import pytest

from src.attendance_tracker.attendance_tracker.common import validators as v
from src.attendance_tracker.attendance_tracker.core.exceptions import ValidationError


def test_descriptor_coerces_numbers():
    assert v.descriptor(None) is None
    assert v.descriptor([1, "0.5", 2.25]) == [1.0, 0.5, 2.25]


@pytest.mark.parametrize(
    "value",
    [json.loads("[NaN, NaN, NaN]"), [float("inf"), 0.1], ["-Infinity"], ["nan"]],
)
def test_descriptor_rejects_non_finite(value):
    with pytest.raises(ValidationError) as exc:
        v.descriptor(value)
    assert exc.value.errors == {"faceDescriptor": "must contain only finite numbers"}


@pytest.mark.parametrize("value", ["[0.1, 0.2]", 0.5, ["a", "b"]])
def test_descriptor_rejects_non_lists(value):
    with pytest.raises(ValidationError):
        v.descriptor(value)
