from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from domain.exceptions import ValidationError
from domain.form import FormSchema


@dataclass(frozen=True)
class FormValidator:
    def validate(self, schema: FormSchema, values: Dict[str, Any]) -> None:
        errors = self.find_errors(schema, values)
        if errors:
            raise ValidationError("; ".join(errors.values()), errors=errors)

    def find_errors(self, schema: FormSchema, values: Dict[str, Any]) -> Dict[str, str]:
        errors: Dict[str, str] = {}
        for element in schema.elements:
            rule = element.state("required")
            if rule is None or not rule.applies(values):
                continue
            value = values.get(element.name)
            if value is None or str(value).strip() == "":
                errors[element.name] = f"{element.title or element.name} field is required."
        return errors
