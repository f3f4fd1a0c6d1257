from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from ariadne import gql
from graphql import GraphQLSchema, build_schema, get_introspection_query, graphql_sync

KIND_OBJECT = "OBJECT"
KIND_INPUT_OBJECT = "INPUT_OBJECT"
KIND_ENUM = "ENUM"
KIND_INTERFACE = "INTERFACE"

DEFAULT_METADATA = {"foo": "bar"}

TEST_SCHEMA_SDL = gql(
    """
    type MyType {
        myField(myArg: String): String
    }

    type Query {
        myQuery(myArg: String): String
    }

    type Mutation {
        myMutation(myArg: String): String
    }

    input CreateUserInput {
        name: String!
        email: String!
    }

    enum MyEnum {
        ONE
        TWO
        THREE
    }

    interface MyInterface {
        id: ID
        foo: String
    }
    """
)


class DataFiles:
    TESTS_DATA_DIR: Path = Path(__file__).parent / "data"
    PLUGIN_CONFIG: Path = TESTS_DATA_DIR / "plugin_config.yaml"
    METADATA_TREE_JSON: Path = TESTS_DATA_DIR / "metadata_tree.json"


@pytest.fixture(scope="session")
def sample_schema() -> GraphQLSchema:
    return build_schema(TEST_SCHEMA_SDL)


def introspect(schema: GraphQLSchema) -> dict[str, Any]:
    """Run the standard introspection query and wrap the result like a server response."""
    result = graphql_sync(schema, get_introspection_query())
    assert result.errors is None, result.errors
    assert result.data is not None
    return {"data": result.data}


@pytest.fixture
def introspection_response(sample_schema: GraphQLSchema) -> dict[str, Any]:
    return introspect(sample_schema)


def make_metadata_tree(metadata_key: str = "metadata", metadata: Any = DEFAULT_METADATA) -> dict[str, Any]:
    """Build a metadata tree covering every kind of the test schema."""

    def entry(**children: Any) -> dict[str, Any]:
        return {metadata_key: metadata, **children}

    return {
        KIND_OBJECT: {
            "MyType": entry(fields={"myField": entry(args={"myArg": entry()})}),
            "Query": entry(fields={"myQuery": entry(args={"myArg": entry()})}),
            "Mutation": entry(fields={"myMutation": entry(args={"myArg": entry()})}),
        },
        KIND_INPUT_OBJECT: {
            "CreateUserInput": entry(inputFields={"name": entry(), "email": entry()}),
        },
        KIND_ENUM: {
            "MyEnum": entry(enumValues={"TWO": entry()}),
        },
        KIND_INTERFACE: {
            "MyInterface": entry(fields={"id": entry()}),
        },
    }


@pytest.fixture
def metadata_tree() -> dict[str, Any]:
    return make_metadata_tree()


def types_of(response: dict[str, Any]) -> list[dict[str, Any]]:
    schema = response["data"]["__schema"] if "data" in response else response["__schema"]
    types: list[dict[str, Any]] = schema["types"]
    return types


def find_type(types: list[dict[str, Any]], name: str, kind: str = KIND_OBJECT) -> dict[str, Any]:
    return next(type_ for type_ in types if type_["kind"] == kind and type_["name"] == name)


def find_named(nodes: list[dict[str, Any]], name: str) -> dict[str, Any]:
    return next(node for node in nodes if node["name"] == name)


class RequestContext:
    """Attribute-style host context, as servers usually hand it to plugins."""

    def __init__(self, query: str | None = None, response: Any = None) -> None:
        self.request = type("Request", (), {"query": query})()
        self.response = response


@pytest.fixture
def request_context_factory() -> Callable[..., RequestContext]:
    return RequestContext
