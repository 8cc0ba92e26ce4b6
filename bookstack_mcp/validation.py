from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

import pydantic

from .errors import ValidationError, describe_validation_errors
from .models import SCHEMAS


class ValidationHandler:
    """
    Validate raw tool arguments against the named parameter models.

    Handlers call this before touching the BookStack client, so a bad request
    never reaches the network.
    """

    def __init__(self, enabled: bool = True, strict: bool = False) -> None:
        self._enabled = enabled
        self._strict = strict

    def validate_params(self, raw: Optional[Mapping[str, Any]], schema_name: str) -> Dict[str, Any]:
        if raw is None:
            raw = {}
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Parameters for '{schema_name}' must be an object")
        if not self._enabled:
            return dict(raw)

        model = SCHEMAS.get(schema_name)
        if model is None:
            raise ValidationError(f"Unknown parameter schema '{schema_name}'")

        if self._strict:
            unknown = sorted(set(raw) - set(model.model_fields))
            if unknown:
                raise ValidationError(
                    f"Unexpected parameters for '{schema_name}': {', '.join(unknown)}"
                )

        try:
            validated = model.model_validate(dict(raw))
        except pydantic.ValidationError as e:
            raise ValidationError(f"Invalid parameters for '{schema_name}': {describe_validation_errors(e)}") from e
        return validated.model_dump(mode="json", exclude_none=True)

    def validate_id(self, raw: Any, field: str = "id") -> int:
        """
        Coerce an identifier to a positive integer.
        """
        if isinstance(raw, bool):
            raise ValidationError(f"'{field}' must be a positive integer, got {raw!r}")
        if isinstance(raw, int):
            value = raw
        elif isinstance(raw, float) and raw.is_integer():
            value = int(raw)
        elif isinstance(raw, str) and raw.strip().isdigit():
            value = int(raw.strip())
        else:
            raise ValidationError(f"'{field}' must be a positive integer, got {raw!r}")

        if value < 1:
            raise ValidationError(f"'{field}' must be a positive integer, got {raw!r}")
        return value

    def validate_choice(self, raw: Any, choices: Sequence[str], field: str) -> str:
        if raw not in choices:
            raise ValidationError(f"'{field}' must be one of {', '.join(choices)}, got {raw!r}")
        return raw
