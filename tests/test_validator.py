"""Tests for trailer validation."""

import json
import sys

import pytest

from trip_stream.decoding.validator import PayloadValidator, validate
from trip_stream.domain.errors import MalformedPayloadError, SchemaViolationError
from trip_stream.domain.models import ItineraryPayload, Location, LocationCategory


def payload_json(locations=None, **overrides):
    data = {
        "title": "Temples and Noodles",
        "destination": "Chiang Mai",
        "duration": "2 days",
        "locations": locations if locations is not None else [],
    }
    data.update(overrides)
    return json.dumps(data)


WAT = {"name": "Wat", "lat": 18.7, "lng": 99.0}


def test_minimal_valid_payload():
    outcome = validate(
        '{"title":"T","destination":"D","duration":"2 days",'
        '"locations":[{"name":"Wat","lat":18.7,"lng":99.0}]}'
    )

    assert outcome.payload == ItineraryPayload(
        title="T",
        destination="D",
        duration="2 days",
        locations=(Location(name="Wat", lat=18.7, lng=99.0),),
    )
    assert outcome.warning is None
    assert not outcome.is_partial


def test_optional_fields_are_kept():
    entry = {**WAT, "day": 1, "description": "Golden chedi", "type": "temple"}
    location = validate(payload_json([entry])).payload.locations[0]

    assert location.day == 1
    assert location.description == "Golden chedi"
    assert location.type == "temple"
    assert location.category is LocationCategory.TEMPLE


def test_out_of_range_latitude_is_dropped():
    outcome = validate(payload_json([{"name": "Nowhere", "lat": 200, "lng": 10}]))

    assert outcome.payload.locations == ()
    assert outcome.warning is not None
    assert outcome.warning.dropped_count == 1


def test_two_valid_and_one_invalid_location():
    locations = [
        WAT,
        {"name": "Bad", "lat": 200, "lng": 99.0},
        {"name": "Market", "lat": 18.79, "lng": 98.99},
    ]
    outcome = validate(payload_json(locations))

    assert [loc.name for loc in outcome.payload.locations] == ["Wat", "Market"]
    assert outcome.warning.dropped_count == 1
    assert "locations[1]" in outcome.warning.reasons[0]


@pytest.mark.parametrize(
    "entry",
    [
        {"lat": 1, "lng": 1},
        {"name": "", "lat": 1, "lng": 1},
        {"name": "   ", "lat": 1, "lng": 1},
        {"name": 42, "lat": 1, "lng": 1},
        {"name": "X", "lat": "18.7", "lng": 99.0},
        {"name": "X", "lat": True, "lng": 99.0},
        {"name": "X", "lat": 18.7},
        {"name": "X", "lat": 18.7, "lng": -181},
        {"name": "X", "lat": None, "lng": 1},
        "not an object",
        ["X", 1, 2],
    ],
)
def test_invalid_locations_are_dropped(entry):
    outcome = validate(payload_json([entry, WAT]))

    assert len(outcome.payload.locations) == 1
    assert outcome.warning.dropped_count == 1


def test_non_finite_coordinates_are_dropped():
    candidate = (
        '{"title":"T","destination":"D","duration":"1 day",'
        '"locations":[{"name":"X","lat":NaN,"lng":1}]}'
    )
    outcome = validate(candidate)

    assert outcome.payload.locations == ()
    assert outcome.warning.dropped_count == 1


def test_integer_coordinates_beyond_float_range_are_dropped():
    huge = "9" * 400
    candidate = (
        '{"title":"T","destination":"D","duration":"1 day","locations":['
        '{"name":"Wat","lat":18.7,"lng":99.0},'
        f'{{"name":"X","lat":{huge},"lng":1}}]}}'
    )
    outcome = validate(candidate)

    assert [loc.name for loc in outcome.payload.locations] == ["Wat"]
    assert outcome.warning.dropped_count == 1
    assert "locations[1]" in outcome.warning.reasons[0]


def test_boundary_coordinates_are_accepted():
    outcome = validate(payload_json([{"name": "Pole", "lat": -90, "lng": 180}]))

    assert outcome.payload.locations[0].lat == -90.0
    assert isinstance(outcome.payload.locations[0].lat, float)


@pytest.mark.parametrize(
    "day, expected",
    [(2, 2), (2.0, 2), (0, None), (-1, None), ("2", None), (1.5, None), (True, None)],
)
def test_day_must_be_positive_integer(day, expected):
    outcome = validate(payload_json([{**WAT, "day": day}]))

    assert outcome.payload.locations[0].day == expected
    assert outcome.warning is None


def test_unknown_type_is_preserved():
    location = validate(payload_json([{**WAT, "type": "spaceport"}])).payload.locations[0]

    assert location.type == "spaceport"
    assert location.category is LocationCategory.GENERIC


def test_non_string_optional_fields_are_treated_as_absent():
    location = validate(
        payload_json([{**WAT, "type": 3, "description": ["a"]}])
    ).payload.locations[0]

    assert location.type is None
    assert location.description is None


def test_malformed_json_carries_raw_text():
    with pytest.raises(MalformedPayloadError) as excinfo:
        validate("{title: 'T'")

    assert excinfo.value.raw == "{title: 'T'"
    assert excinfo.value.cause is not None


def test_empty_candidate_is_malformed():
    with pytest.raises(MalformedPayloadError):
        validate("")


@pytest.mark.skipif(
    not hasattr(sys, "get_int_max_str_digits"), reason="no integer digit limit"
)
def test_integer_literal_over_digit_limit_is_malformed():
    candidate = '{"title":"T","destination":"D","duration":"1 day","locations":[' + (
        '{"name":"X","lat":' + "9" * 5000 + ',"lng":1}]}'
    )

    with pytest.raises(MalformedPayloadError) as excinfo:
        validate(candidate)

    assert excinfo.value.raw == candidate
    assert isinstance(excinfo.value.cause, ValueError)


@pytest.mark.parametrize("missing", ["title", "destination", "duration"])
def test_missing_required_field(missing):
    data = json.loads(payload_json([WAT]))
    del data[missing]

    with pytest.raises(SchemaViolationError) as excinfo:
        validate(json.dumps(data))

    assert excinfo.value.field_name == missing


def test_wrong_typed_required_field():
    with pytest.raises(SchemaViolationError) as excinfo:
        validate(payload_json([WAT], duration=3))

    assert excinfo.value.field_name == "duration"


@pytest.mark.parametrize("locations", [None, {"name": "Wat"}, "Wat"])
def test_locations_must_be_a_list(locations):
    data = json.loads(payload_json())
    if locations is None:
        del data["locations"]
    else:
        data["locations"] = locations

    with pytest.raises(SchemaViolationError) as excinfo:
        validate(json.dumps(data))

    assert excinfo.value.field_name == "locations"


def test_top_level_must_be_object():
    with pytest.raises(SchemaViolationError) as excinfo:
        validate("[1, 2, 3]")

    assert excinfo.value.field_name == ""


def test_empty_locations_list_is_valid():
    outcome = PayloadValidator().validate(payload_json([]))

    assert outcome.payload.locations == ()
    assert outcome.warning is None
