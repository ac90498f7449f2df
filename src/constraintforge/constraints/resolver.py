"""Look up field constraints by an "Entity.property" key."""

from constraintforge.constraints.types import ConstraintsDocument, FieldConstraint


def split_constraint_key(key: str) -> tuple[str, str]:
    """Split a constraint key into entity and property names.

    Only the first dot separates the two; the property name keeps any
    further dots ("Hero.address.city" -> ("Hero", "address.city")).
    A key without a dot yields an empty property name.
    """
    entity_name, _, property_name = key.partition(".")
    return entity_name, property_name


def get_field_constraint(
    key: str,
    document: ConstraintsDocument,
) -> FieldConstraint | None:
    """Find the FieldConstraint for a key such as "Hero.name".

    Matching is exact on both entity and property name.

    Returns:
        The constraint, or None when the entity or property is unknown
    """
    entity_name, property_name = split_constraint_key(key)

    entity = document.get(entity_name)
    if entity is None:
        return None

    return entity.get(property_name)
