import math

import pytest

from ServoFilter.filters.iir6 import IIR6, LEN


def _record():
    ba = tuple(0.1 * (i + 1) for i in range(LEN))
    return IIR6(ba=ba, y_offset=0.5, y_min=-2.0, y_max=3.5)


def test_dict_round_trip():
    rec = _record()
    data = rec.to_dict()
    assert set(data) == {"ba", "y_offset", "y_min", "y_max"}
    assert IIR6.from_dict(data) == rec


def test_json_round_trip_with_infinite_limits():
    rec = _record().replace(y_min=-math.inf, y_max=math.inf)
    back = IIR6.from_json(rec.to_json())
    assert back == rec


def test_missing_field_is_rejected():
    data = _record().to_dict()
    del data["y_max"]
    with pytest.raises(ValueError, match="y_max"):
        IIR6.from_dict(data)


def test_unknown_field_is_rejected():
    data = _record().to_dict()
    data["gain"] = 2.0
    with pytest.raises(ValueError, match="gain"):
        IIR6.from_dict(data)


def test_wrong_tap_count_is_rejected():
    data = _record().to_dict()
    data["ba"] = data["ba"][:-1]
    with pytest.raises(ValueError, match="13"):
        IIR6.from_dict(data)


def test_bad_json_is_a_value_error():
    with pytest.raises(ValueError):
        IIR6.from_json("{not json")
    with pytest.raises(ValueError):
        IIR6.from_json("[1, 2, 3]")


@pytest.mark.parametrize(
    "field, value",
    [
        ("y_offset", None),
        ("y_offset", "0.5"),
        ("y_min", True),
        ("y_max", [1.0]),
    ],
)
def test_non_numeric_scalar_is_rejected(field, value):
    data = _record().to_dict()
    data[field] = value
    with pytest.raises(ValueError, match=field):
        IIR6.from_dict(data)


@pytest.mark.parametrize("tap", ["0.5", None, False])
def test_non_numeric_tap_is_rejected(tap):
    data = _record().to_dict()
    data["ba"][3] = tap
    with pytest.raises(ValueError, match="'ba' entry 3"):
        IIR6.from_dict(data)


def test_inverted_limits_are_rejected():
    data = _record().to_dict()
    data["y_min"], data["y_max"] = 1.0, -1.0
    with pytest.raises(ValueError, match="y_min"):
        IIR6.from_dict(data)


def test_integer_fields_are_accepted():
    data = {"ba": [0] * LEN, "y_offset": 0, "y_min": -1, "y_max": 1}
    assert IIR6.from_dict(data).to_dict() == data
