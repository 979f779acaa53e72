import datetime as dt

from auth_sqlite.formatting import (
    insertable_from_object,
    object_from_row,
    parse_iso_date,
    to_iso_string,
)

UTC = dt.timezone.utc


def test_empty_inputs_give_none():
    assert object_from_row({}) is None
    assert insertable_from_object({}) is None
    assert object_from_row(None) is None


def test_row_date_string_becomes_datetime():
    row = {"id": "u1", "name": "Alice", "emailVerified": "2024-01-15T10:30:00.000Z"}
    obj = object_from_row(row)
    assert obj["emailVerified"] == dt.datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    assert obj["name"] == "Alice"
    assert obj["id"] == "u1"


def test_row_date_variants():
    # no fraction, minute precision, numeric offset
    assert parse_iso_date("2024-01-15T10:30:00Z") == dt.datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    assert parse_iso_date("2024-01-15T10:30Z") == dt.datetime(2024, 1, 15, 10, 30, tzinfo=UTC)
    assert parse_iso_date("2024-01-15T12:30:00.5+02:00") == dt.datetime(2024, 1, 15, 10, 30, 0, 500000, tzinfo=UTC)
    # more than six fractional digits are truncated
    assert parse_iso_date("2024-01-15T10:30:00.1234567Z").microsecond == 123456


def test_non_dates_pass_through():
    row = {
        "plain": "hello",
        "date_only": "2024-01-15",
        "no_zone": "2024-01-15T10:30:00",
        "bad_day": "2024-02-31T10:30:00Z",
        "epoch": 1705314600,
        "nothing": None,
    }
    assert object_from_row(row) == row


def test_epoch_integers_are_not_coerced():
    obj = object_from_row({"expires_at": 1705314600})
    assert obj["expires_at"] == 1705314600


def test_insertable_serializes_like_js():
    when = dt.datetime(2024, 1, 15, 10, 30, 0, 123456, tzinfo=UTC)
    out = insertable_from_object({"expires": when, "token": "abc", "n": 3})
    assert out == {"expires": "2024-01-15T10:30:00.123Z", "token": "abc", "n": 3}


def test_insertable_converts_offsets_to_utc_and_naive_as_utc():
    cet = dt.timezone(dt.timedelta(hours=1))
    assert to_iso_string(dt.datetime(2024, 1, 15, 11, 30, tzinfo=cet)) == "2024-01-15T10:30:00.000Z"
    assert to_iso_string(dt.datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00.000Z"


def test_round_trip_keeps_millisecond_precision():
    original = dt.datetime(2023, 7, 4, 23, 59, 58, 987654, tzinfo=UTC)
    back = object_from_row(insertable_from_object({"expires": original}))["expires"]
    assert back == original.replace(microsecond=987000)


def test_row_like_objects_are_accepted():
    class FakeRow:
        def __init__(self, data):
            self._d = data

        def keys(self):
            return list(self._d.keys())

        def __getitem__(self, k):
            return self._d[k]

        def __len__(self):
            return len(self._d)

    obj = object_from_row(FakeRow({"expires": "2030-01-01T00:00:00.000Z"}))
    assert obj == {"expires": dt.datetime(2030, 1, 1, tzinfo=UTC)}
