from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Annotated

from pydantic import BaseModel

from aoplog import RuntimeOptions, SensitiveData
from aoplog.core import ValueFormatter
from aoplog.core.masking import mask_with_length


@dataclass
class Credentials:
    user: str
    password: Annotated[str, SensitiveData()]


@dataclass
class Point:
    x: int
    y: int


class ApiKey(BaseModel):
    owner: str
    key: Annotated[str, SensitiveData(show_length=True)]


@dataclass
class Order:
    id: int
    note: str
    lines: list[object]


@dataclass
class Shipment:
    id: int
    owner: Credentials


class Account(BaseModel):
    name: str
    keys: list[ApiKey]


class _Endless:
    """Re-iterable with no end; counts how many items were pulled."""

    def __init__(self) -> None:
        self.pulled = 0

    def __iter__(self) -> Iterator[int]:
        value = 0
        while True:
            self.pulled += 1
            yield value
            value += 1


class _BrokenIterable:
    def __iter__(self) -> Iterator[int]:
        raise RuntimeError("cannot iterate")


def _formatter(**options: object) -> ValueFormatter:
    return ValueFormatter(RuntimeOptions(**options))


def test_scalars_and_none() -> None:
    formatter = _formatter()
    assert formatter.format_value(None) == "null"
    assert formatter.format_value(42) == 42
    assert formatter.format_value(2.5) == 2.5
    assert formatter.format_value(True) is True


def test_strings_are_quoted_and_truncated() -> None:
    formatter = _formatter(max_string_length=5)
    assert formatter.format_value("abc") == '"abc"'
    assert formatter.format_value("abcde") == '"abcde"'
    assert formatter.format_value("abcdefgh") == '"abcde..." (truncated from 8)'


def test_collections_render_their_items() -> None:
    formatter = _formatter()
    assert formatter.format_value([1, 2, 3]) == "[1, 2, 3]"
    assert formatter.format_value(("a", None)) == '["a", null]'
    assert formatter.format_value({"a": 1, "b": [True]}) == '{"a": 1, "b": [True]}'


def test_long_collections_show_a_bounded_prefix() -> None:
    formatter = _formatter(max_collection_size=3)
    assert formatter.format_value([0, 1, 2]) == "[0, 1, 2]"
    assert formatter.format_value(list(range(100))) == (
        "[Collection with 3+ items (showing first 3): [0, 1, 2]]"
    )


def test_infinite_iterable_pulls_at_most_limit_plus_one_items() -> None:
    endless = _Endless()
    rendered = _formatter().format_value(endless)

    assert endless.pulled <= 11
    assert rendered == (
        "[Collection with 10+ items (showing first 10): [0, 1, 2, 3, 4, 5, 6, 7, 8, 9]]"
    )


def test_one_shot_iterators_are_not_consumed() -> None:
    numbers = (n for n in range(3))
    assert _formatter().format_value(numbers) == "<generator>"
    assert list(numbers) == [0, 1, 2]

    items = iter([1, 2])
    assert _formatter().format_value(items) == "<list_iterator>"
    assert next(items) == 1


def test_bytes_render_as_truncated_repr() -> None:
    formatter = _formatter(max_string_length=6)
    assert formatter.format_value(b"ab") == "b'ab'"
    assert formatter.format_value(b"abcdef") == "b'abcd... (truncated from 9)"


def test_deep_nesting_is_cut_off() -> None:
    assert _formatter().format_value([[[[[1]]]]]) == "[[[[...]]]]"


def test_other_objects_pass_through_unchanged() -> None:
    marker = object()
    assert _formatter().format_value(marker) is marker


def test_plain_records_render_field_by_field() -> None:
    formatter = _formatter(max_string_length=3)
    assert formatter.format_value(Point(1, 2)) == "Point(x=1, y=2)"
    assert formatter.format_value(Order(7, "abcdef", [])) == (
        'Order(id=7, note="abc..." (truncated from 6), lines=[])'
    )


def test_sensitive_dataclass_fields_are_masked() -> None:
    rendered = _formatter().format_value(Credentials("alice", "hunter2"))
    assert rendered == 'Credentials(user="alice", password=***SENSITIVE***)'
    assert "hunter2" not in rendered


def test_sensitive_model_fields_are_masked_with_length() -> None:
    rendered = _formatter().format_value([ApiKey(owner="ops", key="abcde")])
    assert rendered == '[ApiKey(owner="ops", key=***SENSITIVE(5)***)]'


def test_formatting_failures_degrade_to_placeholder() -> None:
    formatter = _formatter()
    assert formatter.format_value(_BrokenIterable()) == "<unformattable _BrokenIterable>"
    assert formatter.format_value([_BrokenIterable()]) == "[<unformattable _BrokenIterable>]"


def test_format_parameters() -> None:
    formatter = _formatter()
    assert formatter.format_parameters({}) == "no parameters"
    assert formatter.format_parameters({"count": 2, "name": "bob"}) == 'count=2, name="bob"'


def test_mask_with_length_places_length_before_trailing_stars() -> None:
    assert mask_with_length("***SENSITIVE***", "secret1234") == "***SENSITIVE(10)***"
    assert mask_with_length("***", "abc") == "***(3)"
    assert mask_with_length("<hidden>", "abcd") == "<hidden>(4)"
    assert mask_with_length("***SENSITIVE***", 12345) == "***SENSITIVE***"


def test_sensitive_fields_of_nested_records_are_masked() -> None:
    formatter = _formatter()
    shipment = Shipment(1, Credentials("alice", "hunter2"))

    rendered = formatter.format_value(shipment)

    assert rendered == 'Shipment(id=1, owner=Credentials(user="alice", password=***SENSITIVE***))'
    assert "hunter2" not in formatter.format_value([shipment, Shipment(2, shipment.owner)])
    assert formatter.format_value(Order(3, "n", [shipment])) == (
        'Order(id=3, note="n", lines=[Shipment(id=1, owner=Credentials('
        'user="alice", password=***SENSITIVE***))])'
    )


def test_sensitive_fields_of_nested_models_are_masked() -> None:
    account = Account(name="ops", keys=[ApiKey(owner="ops", key="abcde")])
    assert _formatter().format_value(account) == (
        'Account(name="ops", keys=[ApiKey(owner="ops", key=***SENSITIVE(5)***)])'
    )


def test_records_below_the_depth_limit_are_cut_off() -> None:
    rendered = _formatter().format_value([[[Shipment(1, Credentials("alice", "hunter2"))]]])
    assert rendered == "[[[Shipment(id=1, owner=...)]]]"
