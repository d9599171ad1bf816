from datetime import datetime, timezone

from pydantic import BaseModel

from declarest import ParameterBinding, ParameterRole
from declarest._utils import serialize_body


def body(index: int) -> ParameterBinding:
    return ParameterBinding(role=ParameterRole.BODY, key="body", index=index)


class Item(BaseModel):
    name: str
    created: datetime


class TestSerializeBody:
    def test_bound_argument_is_json_encoded(self):
        content, data = serialize_body([body(1)], ["ignored", {"a": [1, 2]}])

        assert content == '{"a":[1,2]}'
        assert data is None

    def test_without_binding_there_is_no_body(self):
        assert serialize_body([], [{"a": 1}]) == (None, None)

    def test_absent_argument_gives_no_body(self):
        assert serialize_body([body(0)], [None]) == (None, None)

    def test_only_first_binding_is_used(self):
        content, _ = serialize_body([body(0), body(1)], [[1], [2]])

        assert content == "[1]"

    def test_form_data_passes_first_argument_through(self):
        form = {"field": "value"}

        content, data = serialize_body([body(1)], [form, {"b": 2}], is_form_data=True)

        assert content is None
        assert data is form

    def test_models_and_dates_are_encoded(self):
        item = Item(name="lamp", created=datetime(2024, 1, 2, tzinfo=timezone.utc))

        content, _ = serialize_body([body(0)], [item])

        assert content == '{"name":"lamp","created":"2024-01-02T00:00:00Z"}'
