import re

from pydantic import BaseModel

PLACEHOLDER = re.compile(r"\{\{\s*(\w+)\s*\}\}")


class Prompt(BaseModel):
    name: str
    version: str
    description: str
    inputs: dict[str, str]
    template: str
    system: str = ""

    class Config:
        extra = "forbid"

    def render(self, **values: str) -> str:
        """Fill ``{{ name }}`` placeholders in the template.

        Raises:
            KeyError: If a declared input is missing from ``values``.
        """
        missing = set(self.inputs) - set(values)
        if missing:
            raise KeyError(f"Prompt '{self.name}' missing inputs: {sorted(missing)}")
        return PLACEHOLDER.sub(lambda m: values.get(m.group(1), m.group(0)), self.template)
