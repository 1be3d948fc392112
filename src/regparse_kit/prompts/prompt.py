import re

from pydantic import BaseModel, ConfigDict

_PLACEHOLDER = re.compile(r"\{\{\s*([A-Za-z_][A-Za-z0-9_]*)\s*\}\}")


class Prompt(BaseModel):
    """A versioned prompt: system instructions plus a user-message template."""

    model_config = ConfigDict(extra="forbid")

    name: str
    version: str
    description: str
    inputs: dict[str, str]
    system: str = ""
    template: str

    def render(self, **values: str) -> str:
        """Fill ``{{ name }}`` placeholders of the user template.

        Raises:
            KeyError: If a placeholder has no value.
        """

        def substitute(match: re.Match[str]) -> str:
            key = match.group(1)
            if key not in values:
                raise KeyError(f"Missing value for prompt input '{key}'")
            return values[key]

        return _PLACEHOLDER.sub(substitute, self.template)
