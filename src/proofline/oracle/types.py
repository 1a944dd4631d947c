from pydantic import BaseModel, Field


class CheckResult(BaseModel):
    """Verdict for one sentence.

    Carries no position. The same verdict applies wherever the sentence
    text occurs.
    """

    has_error: bool = Field(alias="hasError")
    correction: str = ""
    explanation: str = ""

    class Config:
        populate_by_name = True
        frozen = True

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)
