"""Form step table and field allow-list.

The fixed steps (2, 3, 4 and final) are plain data: which fields they
write, which step the record must currently be at, and whether the step
completes the submission. One update routine in the repository drives
all of them.

Canonical sequence: step1 → step2 → step3 → step4 → final (step = 5).
Steps 5–10 are optional extra pages that accept any allow-listed field
and may skip ahead.
"""

import json
from dataclasses import dataclass
from typing import Any, Optional

# Request key → Submission attribute.
FIELD_COLUMNS: dict[str, str] = {
    "userName": "user_name",
    "phoneNumber": "phone_number",
    "idNumber": "id_number",
    "offerType": "offer_type",
    "regType": "reg_type",
    "birthDate": "birth_date",
    "serialNumber": "serial_number",
    "carYear": "car_year",
    "carMake": "car_make",
    "usageType": "usage_type",
    "city": "city",
    "startDate": "start_date",
    "insuranceType": "insurance_type",
    "insuranceClass": "insurance_class",
    "additionalCoverage": "additional_coverage",
    "coverageAmount": "coverage_amount",
}

CORRELATION_KEY = "idNumber"

DYNAMIC_STEP_NUMBERS = range(5, 11)


@dataclass(frozen=True)
class StepDefinition:
    """One fixed form step."""

    name: str
    step_number: int
    expected_prior_step: int
    fields: tuple[str, ...]  # request keys
    is_terminal: bool = False

    def columns(self) -> dict[str, str]:
        return {key: FIELD_COLUMNS[key] for key in self.fields}


STEP1_FIELDS: tuple[str, ...] = (
    "userName",
    "phoneNumber",
    "idNumber",
    "offerType",
    "regType",
    "birthDate",
    "serialNumber",
    "carYear",
)

FIXED_STEPS: dict[str, StepDefinition] = {
    "step2": StepDefinition(
        name="step2",
        step_number=2,
        expected_prior_step=1,
        fields=("carMake", "usageType", "city", "startDate"),
    ),
    "step3": StepDefinition(
        name="step3",
        step_number=3,
        expected_prior_step=2,
        fields=("insuranceType", "insuranceClass"),
    ),
    "step4": StepDefinition(
        name="step4",
        step_number=4,
        expected_prior_step=3,
        fields=("additionalCoverage",),
    ),
    "final": StepDefinition(
        name="final",
        step_number=5,
        expected_prior_step=4,
        fields=("coverageAmount",),
        is_terminal=True,
    ),
}


def to_column_value(value: Any) -> Optional[str]:
    """Coerce a JSON value to the text stored in a form column."""
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def unknown_fields(payload: dict[str, Any]) -> list[str]:
    """Keys that do not map to a form column."""
    return sorted(key for key in payload if key not in FIELD_COLUMNS)
