"""
Validation options for recordtree.

Options can be created directly, from a dict or from a YAML file; only the
specified values override the defaults.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from dataclasses import fields as dataclass_fields
from pathlib import Path
from typing import Any


@dataclass
class ValidationOptions:
    """Configuration for a validation pass.

    Examples:
        # All defaults
        options = ValidationOptions()

        # Ignore a field and bypass the uuid rule
        options = ValidationOptions(ignore=["UUID"], skip_rules=["uuid"])

        # From YAML file
        options = ValidationOptions.from_yaml("validation.yaml")
    """

    # Native field names excluded from the walk, at any depth
    ignore: list[str] = field(default_factory=list)

    # Rule keywords bypassed for every attribute (e.g. "uuid", "in")
    skip_rules: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> ValidationOptions:
        """Create from dict, only overriding specified values.

        Args:
            config: Dictionary with partial overrides. Keys that are not
                option names are dropped.

        Returns:
            ValidationOptions instance with specified overrides
        """
        valid_fields = {f.name for f in dataclass_fields(cls)}
        filtered = {
            k: [v] if isinstance(v, str) else list(v or [])
            for k, v in config.items()
            if k in valid_fields
        }
        return cls(**filtered)

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> ValidationOptions:
        """Create from YAML file with partial overrides.

        Example YAML:
            ignore: [Password]
            skip_rules: [currency]
        """
        import yaml

        path = Path(yaml_path)
        with path.open() as f:
            config = yaml.safe_load(f) or {}

        return cls.from_dict(config)


def create_validation_options(
    options: ValidationOptions | dict | None = None,
) -> ValidationOptions:
    """
    Factory function for creating ValidationOptions with flexible input types.

    Args:
        options: ValidationOptions instance, dict to override defaults, or None for defaults

    Returns:
        ValidationOptions instance
    """
    if isinstance(options, ValidationOptions):
        return options
    elif isinstance(options, dict):
        return ValidationOptions.from_dict(options)
    else:
        return ValidationOptions()
