"""Tests for the response key transform."""
from membership.client.casing import camelize_keys, to_camel_case


def test_to_camel_case():
    assert to_camel_case("membership_end") == "membershipEnd"
    assert to_camel_case("shift_id") == "shiftId"
    assert to_camel_case("name") == "name"


def test_camelize_is_recursive():
    body = {
        "students": [
            {"membership_end": "2024-02-01", "shift_title": None},
            {"membership_end": "2024-03-01", "nested_list": [{"inner_key": 1}]},
        ],
        "total_count": 2,
    }
    assert camelize_keys(body) == {
        "students": [
            {"membershipEnd": "2024-02-01", "shiftTitle": None},
            {"membershipEnd": "2024-03-01", "nestedList": [{"innerKey": 1}]},
        ],
        "totalCount": 2,
    }


def test_scalars_untouched():
    assert camelize_keys("some_value") == "some_value"
    assert camelize_keys(None) is None
    assert camelize_keys([1, "a_b"]) == [1, "a_b"]
