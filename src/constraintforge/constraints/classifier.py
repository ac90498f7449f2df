"""Pick the single most specific field type from declared type tags."""

from collections.abc import Iterable

from constraintforge.constraints.types import FieldType

# Most specific first; TEXT is last.
FIELD_TYPE_ORDER: tuple[FieldType, ...] = tuple(FieldType)

_INDEX_BY_TAG: dict[str, int] = {
    field_type.value: index for index, field_type in enumerate(FIELD_TYPE_ORDER)
}


def most_specific_field_type(types: Iterable[str] | None) -> FieldType:
    """Return the most specific canonical type among the declared tags.

    For example ["email", "text"] gives EMAIL. Unknown and non-string tags
    are ignored, and None or an empty sequence gives TEXT.
    """
    best = len(FIELD_TYPE_ORDER) - 1

    for tag in types or ():
        if isinstance(tag, FieldType):
            tag = tag.value
        if not isinstance(tag, str):
            continue
        index = _INDEX_BY_TAG.get(tag)
        if index is not None and index < best:
            best = index

    return FIELD_TYPE_ORDER[best]
