"""
Prompt loading and formatting for diabetes risk assessment.

Templates live as markdown files next to this module and use simple
{variable} substitution. The builder output is a pure function of the
PatientInput and the BMI mode: the same input always yields the same text.
"""

import re
from enum import Enum
from pathlib import Path

from diapredict.models.enums import Confidence
from diapredict.models.patient import PatientInput


TEMPLATES_DIR = Path(__file__).parent / "templates"


class BMIMode(str, Enum):
    """How BMI is presented to the model."""

    COMPUTED = "computed"  # Value injected alongside the formula
    FORMULA = "formula"  # Formula only; the model evaluates it


def load_prompt(name: str) -> str:
    """
    Load a prompt template from a markdown file.

    Args:
        name: Template name without extension (e.g., "risk_assessment")

    Returns:
        The prompt template as a string

    Raises:
        FileNotFoundError: If the template file doesn't exist
    """
    prompt_path = TEMPLATES_DIR / f"{name}.md"

    if not prompt_path.exists():
        raise FileNotFoundError(
            f"Prompt file not found: {prompt_path}. "
            f"Expected template '{name}' in {TEMPLATES_DIR}."
        )

    return prompt_path.read_text(encoding="utf-8")


def format_prompt(template: str, **kwargs) -> str:
    """
    Format a prompt template with variable substitution.

    Uses simple {variable} replacement in a single pass, so literal JSON
    braces in the template and braces inside substituted values are left alone.
    """
    if not kwargs:
        return template
    pattern = re.compile(r"\{(" + "|".join(re.escape(key) for key in kwargs) + r")\}")
    return pattern.sub(lambda match: str(kwargs[match.group(1)]), template)


def _format_number(value: float) -> str:
    # 75.0 -> "75", 75.5 -> "75.5"
    return f"{value:g}"


class PromptBuilder:
    """Turns a validated PatientInput into the system and user prompts."""

    def __init__(self, bmi_mode: BMIMode = BMIMode.COMPUTED):
        self.bmi_mode = BMIMode(bmi_mode)
        self._template = load_prompt("risk_assessment")
        self._system_prompt = load_prompt("system").strip()

    @property
    def system_prompt(self) -> str:
        return self._system_prompt

    def bmi_line(self, patient: PatientInput) -> str:
        expression = f"BMI = {_format_number(patient.weight)} / (({patient.height} / 100) ** 2)"
        if self.bmi_mode == BMIMode.FORMULA:
            return expression
        return f"{expression} = {patient.bmi:.1f}"

    def build(self, patient: PatientInput) -> str:
        """
        Build the user prompt for one patient.

        Args:
            patient: Validated patient attributes

        Returns:
            The complete prompt text
        """
        labels = ", ".join(f"'{c.value}'" for c in Confidence)
        return format_prompt(
            self._template,
            age=patient.age,
            blood_group=patient.blood_group,
            gender=patient.gender.value,
            weight=_format_number(patient.weight),
            height=patient.height,
            bmi_line=self.bmi_line(patient),
            confidence_labels=labels,
        )


def build_messages(builder: PromptBuilder, patient: PatientInput) -> list[dict]:
    """Build the chat messages list for the provider call."""
    return [
        {"role": "system", "content": builder.system_prompt},
        {"role": "user", "content": builder.build(patient)},
    ]
