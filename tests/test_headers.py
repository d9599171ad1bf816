from declarest import ParameterBinding, ParameterRole
from declarest._utils import compose_headers


def header(key: str, index: int) -> ParameterBinding:
    return ParameterBinding(role=ParameterRole.HEADER, key=key, index=index)


class TestComposeHeaders:
    def test_dynamic_wins_over_static_wins_over_default(self):
        headers = compose_headers({"A": "1"}, {"A": "2"}, [header("A", 0)], ["3"])

        assert headers["A"] == "3"
        assert headers.get_list("A") == ["3"]

    def test_static_wins_over_default(self):
        headers = compose_headers({"A": "1", "B": "1"}, {"A": "2"}, [], [])

        assert headers["A"] == "2"
        assert headers["B"] == "1"

    def test_override_is_case_insensitive(self):
        headers = compose_headers(
            {"Content-Type": "application/json"}, {"content-type": "text/plain"}, [], []
        )

        assert headers.get_list("Content-Type") == ["text/plain"]

    def test_absent_dynamic_value_keeps_earlier_header(self):
        headers = compose_headers({"A": "1"}, None, [header("A", 0)], [None])

        assert headers["A"] == "1"

    def test_dynamic_values_are_rendered_as_text(self):
        headers = compose_headers(None, None, [header("X-Count", 0)], [5])

        assert headers["X-Count"] == "5"
