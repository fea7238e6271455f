# tests/core/test_functions.py

from agealchemy.core.builder import query_builder
from agealchemy.core.functions import (
    aggregation,
    list_ops,
    string,
    path_functions,
    type_functions,
)


class TestAggregation:
    def test_count_defaults_to_star(self):
        assert aggregation.count() == "count(*)"
        assert aggregation.count("n") == "count(n)"

    def test_numeric_aggregates(self):
        assert aggregation.sum("n.age") == "sum(n.age)"
        assert aggregation.avg("n.age") == "avg(n.age)"
        assert aggregation.min("n.age") == "min(n.age)"
        assert aggregation.max("n.age") == "max(n.age)"

    def test_collect(self):
        assert aggregation.collect("n.name") == "collect(n.name)"


class TestListOperations:
    def test_create_formats_items(self):
        assert list_ops.create([1, "a", True]) == '[1, "a", true]'

    def test_create_empty(self):
        assert list_ops.create([]) == "[]"

    def test_comprehension(self):
        assert list_ops.comprehension("x", "n.scores") == "[x IN n.scores]"
        assert list_ops.comprehension("x", "n.scores", filter="x > 10") == "[x IN n.scores WHERE x > 10]"
        assert list_ops.comprehension("x", "n.scores", map="x * 2") == "[x IN n.scores | x * 2]"
        assert (
            list_ops.comprehension("x", "n.scores", filter="x > 10", map="x * 2")
            == "[x IN n.scores WHERE x > 10 | x * 2]"
        )

    def test_range(self):
        assert list_ops.range(0, 10) == "range(0, 10)"
        assert list_ops.range(0, 10, 2) == "range(0, 10, 2)"


class TestStringFunctions:
    def test_case(self):
        assert string.to_lower("n.name") == "toLower(n.name)"
        assert string.to_upper("n.name") == "toUpper(n.name)"

    def test_trim_and_substring(self):
        assert string.trim("n.name") == "trim(n.name)"
        assert string.substring("n.name", 0) == "substring(n.name, 0)"
        assert string.substring("n.name", 0, 3) == "substring(n.name, 0, 3)"

    def test_concat(self):
        assert string.concat("n.first", '" "', "n.last") == 'n.first + " " + n.last'


class TestPathAndTypeFunctions:
    def test_path_functions(self):
        assert path_functions.length("p") == "length(p)"
        assert path_functions.nodes("p") == "nodes(p)"
        assert path_functions.relationships("p") == "relationships(p)"

    def test_shortest_paths(self):
        assert path_functions.shortest_path("(a)-[*]-(b)") == "shortestPath((a)-[*]-(b))"
        assert path_functions.all_shortest_paths("(a)-[*]-(b)") == "allShortestPaths((a)-[*]-(b))"

    def test_type_functions(self):
        assert type_functions.type("r") == "type(r)"
        assert type_functions.labels("n") == "labels(n)"
        assert type_functions.properties("n") == "properties(n)"

    def test_used_in_builder(self):
        query = (
            query_builder()
            .match("(n:Person)")
            .return_(f"{aggregation.count('n')} AS total")
            .build()
        )
        assert query == "MATCH (n:Person) RETURN count(n) AS total"
