from graphql import TypeKind

DEFAULT_CHILD_COLLECTION_KEY = "fields"

# Attribute of an introspected type holding its children, per kind.
CHILD_COLLECTION_KEYS: dict[str, str] = {
    TypeKind.OBJECT.name: "fields",
    TypeKind.INTERFACE.name: "fields",
    TypeKind.INPUT_OBJECT.name: "inputFields",
    TypeKind.ENUM.name: "enumValues",
}


def child_collection_key(kind: object) -> str:
    """Return the attribute holding the children of a type of the given kind.

    Kinds without children of their own (SCALAR, UNION, ...) and unknown kinds
    fall back to ``fields``.
    """
    if isinstance(kind, str):
        return CHILD_COLLECTION_KEYS.get(kind, DEFAULT_CHILD_COLLECTION_KEY)
    return DEFAULT_CHILD_COLLECTION_KEY


def is_introspection_type(type_name: str) -> bool:
    return type_name.startswith("__")
