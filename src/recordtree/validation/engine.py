"""
Rule evaluation engine for recordtree.

Validation walks a record, evaluates the ``validate`` tag of every
attribute and collects the failures in a mapping from path name to error
codes.

Length violations accumulate: ``min=5,max=3`` on a 4 character string
reports INVALID_LENGTH twice. Every other violation ends evaluation of the
attribute immediately and is reported alone, discarding codes collected so
far. An attribute therefore reports at most one code unless length rules
failed.
"""

import logging

from pydantic import BaseModel

from recordtree.core.types import VALIDATION_TAG, Validations
from recordtree.exceptions import LengthViolationError, RuleViolationError
from recordtree.structure.attribute import Attribute
from recordtree.structure.tags import all_values
from recordtree.structure.walker import walk
from recordtree.validation.options import ValidationOptions, create_validation_options
from recordtree.validation.rules import RULES

logger = logging.getLogger(__name__)


def validate_attribute(
    attribute: Attribute, options: ValidationOptions | dict | None = None
) -> list[str]:
    """
    Evaluate the validation rules of one attribute.

    Params:
        attribute: Attribute to validate
        options: Validation options; only skip_rules is used here

    Returns:
        Error codes, empty when every rule passes

    Usage:
        class Resource(Record):
            id: str = tagged("abc", json="id", validate="uuid")

        [attribute] = walk(Resource())
        validate_attribute(attribute)  # -> ["INVALID_FORMAT"]
    """
    options = create_validation_options(options)
    validations: list[str] = []

    for rule in all_values(attribute.declaration.lookup(VALIDATION_TAG)):
        # "min=20" -> ("min", "20"); "email" -> ("email", "")
        rule_type, _, rule_value = rule.partition("=")

        if rule_type in options.skip_rules:
            continue

        check = RULES.get(rule_type)
        if check is None:
            continue

        try:
            check(attribute.value, rule_value)
        except LengthViolationError as e:
            validations.append(e.code.value)
        except RuleViolationError as e:
            logger.debug("%s: %s", attribute.full_name(), e)
            return [e.code.value]

    return validations


def validate(
    record: BaseModel, options: ValidationOptions | dict | None = None
) -> Validations:
    """
    Validate a record and all of its attributes.

    When a list attribute fails, its elements are not reported separately.

    Params:
        record: Record instance
        options: Ignored fields and skipped rules

    Returns:
        Mapping of path name to error codes; empty when the record is valid

    Usage:
        class Resource(Record):
            id: str = tagged("abc", json="id", validate="uuid")

        validate(Resource())  # -> {"id": ["INVALID_FORMAT"]}
    """
    options = create_validation_options(options)
    validations: Validations = {}

    attributes = walk(record, (), options.ignore)

    position = 0
    while position < len(attributes):
        attribute = attributes[position]
        errors = validate_attribute(attribute, options)

        if errors:
            validations[attribute.full_name()] = errors

            # Descendants directly follow their container in a walk
            if attribute.is_list:
                position += attribute.descendant_count()

        position += 1

    return validations
