from schedule_overrides.api import (
    collect_dates,
    dates_between,
    get_header,
    normalize_record,
    parse_json,
    parse_stored,
)


def test_dates_between_inclusive():
    assert dates_between("2024-01-01", "2024-01-03") == ["2024-01-01", "2024-01-02", "2024-01-03"]


def test_dates_between_single_day():
    assert dates_between("2024-05-05", "2024-05-05") == ["2024-05-05"]


def test_dates_between_crosses_dst_and_leap_day():
    # Europe and US both switch clocks in late March
    days = dates_between("2024-02-27", "2024-03-31")
    assert days[2] == "2024-02-29"
    assert days[-1] == "2024-03-31"
    assert len(days) == 34
    assert len(set(days)) == len(days)


def test_dates_between_bad_input():
    assert dates_between("soon", "2024-01-01") == []
    assert dates_between("2024-01-03", "2024-01-01") == []


def test_collect_dates_ignores_non_list_dates():
    assert collect_dates({"dates": "2024-01-01"}) == []
    assert collect_dates({"date": "2024-01-01", "from": "2024-01-02"}) == ["2024-01-01"]


def test_normalize_record_defaults():
    assert normalize_record({}) == {"closed": False, "start": None, "end": None, "detail": ""}


def test_normalize_record_truthy_closed():
    record = normalize_record({"closed": 1, "start": "09:00", "end": "10:00", "detail": "note"})
    assert record == {"closed": True, "start": None, "end": None, "detail": "note"}


def test_get_header():
    assert get_header({"X-ADMIN-KEY": "k"}, "x-admin-key") == "k"
    assert get_header(None, "x-admin-key") == ""
    assert get_header({"x-admin-key": None}, "x-admin-key") == ""


def test_parse_json_non_object():
    assert parse_json({"body": "[1, 2]"}) == {}
    assert parse_json({"body": None}) == {}
    assert parse_json({"body": '{"a": 1}'}) == {"a": 1}


def test_parse_stored():
    assert parse_stored(None) is None
    assert parse_stored("") is None
    assert parse_stored('{"closed": true}') == {"closed": True}
    assert parse_stored("garbage") == "garbage"


def test_dates_between_reaches_last_representable_day():
    assert dates_between("9999-12-30", "9999-12-31") == ["9999-12-30", "9999-12-31"]


def test_dates_between_requires_dashed_format():
    assert dates_between("20240101", "20240102") == []
    assert dates_between("2024-W01-1", "2024-01-02") == []
    assert dates_between("2024-01-01\n", "2024-01-02") == []
