"""Read and write Aha feature custom fields by name.

Aha stores custom fields differently depending on the field definition:
scalar text lives in ``custom_fields`` as a string, single selects are written
by option id, multi selects are string lists, and "link many" fields are
custom-object links referencing record ids. ``resolve_custom_field`` hides
that behind four actions:

* GET      current value (multi-valued fields joined with ``,``)
* COMPARE  ``"true"``/``"false"``; an empty value checks the field is empty
* SET      set the value (append for multi-valued fields), empty clears
* REMOVE   remove the value if present, empty clears everything

It never talks to Aha. Writes come back as ``FieldOutcome.update``, the PUT
payload for ``/features/<ref>``; an outcome without an update is a no-op.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from ..exceptions import (
    CustomFieldError, InvalidOptionError, NotFoundError, UnsupportedFieldError
)
from ..models.aha import CustomFieldDefinition, Feature


logger = logging.getLogger(__name__)


class FieldAction(Enum):
    """Custom field actions."""
    GET = "GET"
    SET = "SET"
    COMPARE = "COMPARE"
    REMOVE = "REMOVE"


@dataclass
class FieldOutcome:
    """Result of resolving a custom field action."""
    value: str = ""
    update: Optional[Dict[str, Any]] = None

    @property
    def is_noop(self) -> bool:
        return self.update is None


def _answer(result: bool) -> FieldOutcome:
    return FieldOutcome(value="true" if result else "false")


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _custom_fields_update(key: str, value: Any) -> Dict[str, Any]:
    return {"feature": {"custom_fields": {key: value}}}


def _object_links_update(key: str, record_ids: List[str]) -> Dict[str, Any]:
    # Aha only clears a link field when sent a list holding an empty string
    return {"feature": {"custom_object_links": {key: record_ids or [""]}}}


def _scalar(feature: Feature, definition: CustomFieldDefinition,
            action: FieldAction, value: str) -> FieldOutcome:
    """Url, note and text fields."""
    key = definition.key
    current = feature.find_custom_field(key)
    existing = _as_text(current.value) if current else ""

    if action is FieldAction.GET:
        return FieldOutcome(value=existing)
    if action is FieldAction.COMPARE:
        return _answer(existing == value)
    if action is FieldAction.SET:
        if existing == value:
            return FieldOutcome()
        return FieldOutcome(update=_custom_fields_update(key, value))

    if not existing or (value and existing != value):
        return FieldOutcome()
    return FieldOutcome(update=_custom_fields_update(key, ""))


def _link_many(feature: Feature, definition: CustomFieldDefinition,
               action: FieldAction, value: str) -> FieldOutcome:
    """Custom-object link fields; values are option labels, stored as record ids."""
    key = definition.key
    id_to_label = {}
    label_to_id = {}
    for option in definition.options:
        label = option.label.strip()
        id_to_label[option.id] = label
        label_to_id[label] = option.id

    option_id = label_to_id.get(value, "")
    if value and not option_id:
        raise InvalidOptionError(f"Can't find {definition.name}/{value!r} as a valid option")

    link = feature.find_object_link(key)
    record_ids = list(link.record_ids) if link else []
    labels = [id_to_label.get(record_id, "") for record_id in record_ids]

    if action is FieldAction.GET:
        return FieldOutcome(value=",".join(sorted(labels)))
    if action is FieldAction.COMPARE:
        if not value:
            return _answer(not record_ids)
        return _answer(value in labels)

    if not value:
        if not record_ids:
            return FieldOutcome()
        return FieldOutcome(update=_object_links_update(key, []))

    if action is FieldAction.SET:
        if value in labels:
            return FieldOutcome()
        return FieldOutcome(update=_object_links_update(key, record_ids + [option_id]))

    if value not in labels:
        return FieldOutcome()
    kept = [record_id for record_id, label in zip(record_ids, labels) if label != value]
    return FieldOutcome(update=_object_links_update(key, kept))


def _select(feature: Feature, definition: CustomFieldDefinition,
            action: FieldAction, value: str) -> FieldOutcome:
    """Single select; reads return the label, writes send the option id."""
    key = definition.key

    option_id = ""
    if action is FieldAction.SET and value:
        for option in definition.options:
            if option.label == value:
                option_id = option.id
                break
        if not option_id:
            raise InvalidOptionError(f"Can't find {definition.name}/{value!r} as a valid option")

    current = feature.find_custom_field(key)
    existing = _as_text(current.value) if current else ""

    if action is FieldAction.GET:
        return FieldOutcome(value=existing)
    if action is FieldAction.COMPARE:
        return _answer(existing == value)
    if action is FieldAction.SET:
        if existing == value:
            return FieldOutcome()
        return FieldOutcome(update=_custom_fields_update(key, option_id))

    if not existing or (value and existing != value):
        return FieldOutcome()
    return FieldOutcome(update=_custom_fields_update(key, ""))


def _current_list(feature: Feature, key: str) -> List[str]:
    current = feature.find_custom_field(key)
    if current is None or current.value is None:
        return []
    if not isinstance(current.value, list):
        raise CustomFieldError(f"Can't read {current.value!r} of {key} as a list")

    values = []
    for item in current.value:
        if not isinstance(item, str):
            raise CustomFieldError(f"Can't read {item!r} of {key} as a string")
        values.append(item.strip())
    return values


def _select_multiple(feature: Feature, definition: CustomFieldDefinition,
                     action: FieldAction, value: str) -> FieldOutcome:
    """Multi select; the value list is sent whole, ``null`` clears it."""
    key = definition.key
    values = _current_list(feature, key)

    if action is FieldAction.GET:
        return FieldOutcome(value=",".join(values))
    if action is FieldAction.COMPARE:
        if not value:
            return _answer(not values)
        return _answer(value in values)

    if not value:
        if not values:
            return FieldOutcome()
        return FieldOutcome(update=_custom_fields_update(key, None))

    if action is FieldAction.SET:
        if value in values:
            return FieldOutcome()
        return FieldOutcome(update=_custom_fields_update(key, values + [value]))

    if value not in values:
        return FieldOutcome()
    kept = [existing for existing in values if existing != value]
    return FieldOutcome(update=_custom_fields_update(key, kept or None))


Handler = Callable[[Feature, CustomFieldDefinition, FieldAction, str], FieldOutcome]

# (definition type prefix, required api_type, handler)
FIELD_KINDS: List[Tuple[str, str, Handler]] = [
    ("CustomFieldDefinitions::UrlField", "url", _scalar),
    ("CustomFieldDefinitions::LinkMany", "array", _link_many),
    ("CustomFieldDefinitions::SelectConstant", "string", _select),
    ("CustomFieldDefinitions::SelectMultipleConstant", "array", _select_multiple),
    ("CustomFieldDefinitions::NoteField", "note", _scalar),
    ("CustomFieldDefinitions::TextField", "string", _scalar),
]


def handler_for(definition: CustomFieldDefinition) -> Optional[Handler]:
    """Pick the handler for a definition, None when its kind is unknown."""
    for prefix, api_type, handler in FIELD_KINDS:
        if not definition.type.startswith(prefix):
            continue
        if definition.api_type != api_type:
            raise UnsupportedFieldError(
                f"Unsupported api_type {definition.api_type!r} for "
                f"{definition.type} field {definition.name!r}"
            )
        return handler
    return None


def resolve_custom_field(
    feature: Feature,
    name: str,
    action: Union[FieldAction, str],
    value: str = ""
) -> FieldOutcome:
    """Resolve ``action`` on the custom field called ``name`` (display name or key).

    Field definitions come from ``feature.product``.
    """
    if isinstance(action, str):
        action = FieldAction(action.upper())
    value = (value or "").strip()

    if feature.product is None:
        raise NotFoundError(
            f"Feature {feature.reference_num} has no product, can't resolve field {name!r}"
        )

    for definition in feature.product.feature_field_definitions():
        if name not in (definition.name, definition.key):
            continue

        handler = handler_for(definition)
        if handler is None:
            logger.warning(f"Unsupported custom field type: {definition.type} / {definition.api_type}")
            continue

        return handler(feature, definition, action, value)

    raise NotFoundError(f"Couldn't find custom field {name!r}")
