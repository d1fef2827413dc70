from __future__ import annotations

import pytest

from conftest import envelope
from emma_core.curves.errors import ResponseFormatError, TransportFailure
from emma_core.io.parser import canonical_series_key, parse_envelope


def test_series_key_truncated_at_first_space():
    assert canonical_series_key("ABC 10Y Curve") == "ABC"
    assert canonical_series_key("Treasury") == "Treasury"
    assert canonical_series_key(None) == ""

    env = parse_envelope(envelope(("ABC 10Y Curve", [(1, 2.5)])))
    assert env.series_keys() == ["ABC"]
    assert env.points[0].series_key == "ABC"


def test_points_parsed_as_floats_in_percent():
    env = parse_envelope('{"Series":[{"Id":"Treasury","Points":[{"X":"5","Y":"3.25"},{"X":"0.5","Y":"5.1"}]}]}')

    assert not env.is_empty
    assert [(p.year, p.rate_pct) for p in env.points] == [(5.0, 3.25), (0.5, 5.1)]


def test_empty_series_list_is_no_data_not_an_error():
    assert parse_envelope('{"Series":[]}').is_empty
    assert parse_envelope("").is_empty
    assert parse_envelope("   ").is_empty
    assert parse_envelope(None).is_empty


def test_only_a_zero_length_series_list_is_empty():
    env = parse_envelope('{"Series":[{"Id":"Treasury","Points":[]}]}')
    assert env.n_series == 1
    assert not env.is_empty

    env = parse_envelope('{"Series":[{"Id":"Treasury","Points":[{"X":"1","Y":"n/a"}]}]}')
    assert env.points == []
    assert not env.is_empty


def test_multiple_series_flattened_in_order():
    env = parse_envelope(envelope(("CAAA BVAL", [(1, 2.9), (2, 2.8)]), ("BVMB", [(1, 2.7)])))

    assert env.series_keys() == ["CAAA", "BVMB"]
    assert len(env.points) == 3
    assert [p.rate_pct for p in env.points_for("BVMB")] == [2.7]


def test_unusable_points_are_dropped():
    body = (
        '{"Series":[{"Id":"ICE","Points":['
        '{"X":"1","Y":"3.0"},{"X":"","Y":"3.1"},{"X":"2","Y":"n/a"},'
        '{"X":"-1","Y":"3.2"},{"X":"3"},"junk"]}]}'
    )
    env = parse_envelope(body)
    assert [(p.year, p.rate_pct) for p in env.points] == [(1.0, 3.0)]


@pytest.mark.parametrize(
    "body",
    [
        "<html>Service Unavailable</html>",
        '{"Data":[]}',
        '{"Series":{"Id":"x"}}',
        '{"Series":["x"]}',
        '{"Series":[{"Id":"x","Points":{"X":"1"}}]}',
        "[1, 2]",
    ],
)
def test_malformed_payload_raises(body):
    with pytest.raises(ResponseFormatError):
        parse_envelope(body)


def test_format_error_is_a_transport_failure():
    assert issubclass(ResponseFormatError, TransportFailure)
