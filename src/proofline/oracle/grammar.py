import logging

from pydantic import ValidationError

from proofline.llms.base import LLMClient, Message, Role
from proofline.observability import names
from proofline.observability.base import MetricsHook, NoOpMetricsHook
from proofline.prompts import Prompt, PromptsLibrary

from .base import Oracle, OracleError
from .types import CheckResult

logger = logging.getLogger(__name__)

PROMPT_NAME = "check_sentence"
PROMPT_VERSION = "1.0"


class GrammarOracle(Oracle):
    """Grammar check backed by an LLM returning a JSON verdict.

    Provider errors (after the client's own transport retries) and replies
    that do not parse into a :class:`CheckResult` surface as
    :class:`OracleError`.
    """

    def __init__(
        self,
        llm_client: LLMClient,
        prompt: Prompt | None = None,
        metrics_hook: MetricsHook = NoOpMetricsHook(),
    ) -> None:
        self._llm = llm_client
        self._prompt = prompt or PromptsLibrary().get(PROMPT_NAME, PROMPT_VERSION)
        self.metrics_hook = metrics_hook

    def build_messages(self, sentence: str) -> list[Message]:
        return [
            Message(role=Role.SYSTEM, content=self._prompt.system),
            Message(role=Role.USER, content=self._prompt.render(sentence=sentence)),
        ]

    async def check(self, sentence: str) -> CheckResult:
        self.metrics_hook.increment(names.ORACLE_CHECKS_TOTAL)
        try:
            response = await self._llm.complete(
                messages=self.build_messages(sentence), json_output=True
            )
        except Exception as exc:
            self.metrics_hook.increment(names.ORACLE_ERRORS_TOTAL, labels={"kind": "transport"})
            raise OracleError(f"completion failed: {exc}") from exc

        if not response.content:
            self.metrics_hook.increment(names.ORACLE_ERRORS_TOTAL, labels={"kind": "empty"})
            raise OracleError(f"empty reply (finish_reason={response.finish_reason})")

        try:
            result = CheckResult.model_validate_json(response.content)
        except ValidationError as exc:
            self.metrics_hook.increment(names.ORACLE_ERRORS_TOTAL, labels={"kind": "parse"})
            logger.debug("Unparseable oracle reply: %s", response.content)
            raise OracleError(f"malformed reply: {exc.error_count()} errors") from exc

        if not result.has_error:
            # correction and explanation are empty when there is no error
            result = CheckResult(has_error=False)
        return result
