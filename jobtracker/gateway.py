"""Run one structured job-description analysis against a single provider."""
from __future__ import annotations

import json
import re
import time
from typing import Any, Callable

from jobtracker.errors import is_permanent, is_rate_limited
from jobtracker.log import get_logger
from jobtracker.models import AnalysisResult
from jobtracker.providers.base import ChatProvider
from jobtracker.retry import retry_with_backoff

log = get_logger(__name__)

MAX_DESCRIPTION_CHARS = 15_000

SYSTEM_PROMPT = """\
You are an expert job description analyzer. Given the following job description, \
extract and generate a structured analysis. Output ONLY valid JSON with this exact structure:
{
  "summary": "A concise 2-3 sentence summary of the job role and responsibilities.",
  "suggestedSkills": ["An array of 5-10 key skills to highlight in a resume, based on the JD."],
  "requirements": {"required": [], "preferred": [], "experience": "Not specified", "education": "Not specified"},
  "insights": {"salaryRange": "Not specified", "location": "Not specified", "companySize": "Not specified", \
"competitionLevel": "Low | Medium | High", "industryTrends": []},
  "actionItems": []
}
Use the job description to extract details accurately. For any field not mentioned, use \
'Not specified' or an empty array. Keep the output concise and professional."""

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_model_output(content: Any, provider: str) -> AnalysisResult:
    """Turn a provider reply into a result; never raises.

    Unparseable replies become a blank result tagged ``<provider>-degraded``.
    """
    data = content if isinstance(content, dict) else _decode(content)
    if data is None:
        log.warning("[%s] reply was not valid JSON — returning degraded result", provider)
        return AnalysisResult(provider=f"{provider}-degraded", fallback=True)
    result = AnalysisResult.from_model_output(data)
    result.provider = provider
    return result


def _decode(content: Any) -> dict[str, Any] | None:
    raw = str(content or "").strip()
    try:
        data = json.loads(raw)
    except ValueError:
        # Free-text replies sometimes wrap the object in prose or a code fence.
        m = _JSON_OBJECT_RE.search(raw)
        if not m:
            return None
        try:
            data = json.loads(m.group(0))
        except ValueError:
            return None
    return data if isinstance(data, dict) else None


class ProviderGateway:
    def __init__(
        self,
        *,
        retries: int = 1,
        base_delay: float = 0.5,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.retries = retries
        self.base_delay = base_delay
        self.sleep = sleep

    def analyze(self, text: str, provider: ChatProvider) -> AnalysisResult:
        """Analyze *text* with *provider*; provider failures propagate."""
        messages = [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": text[:MAX_DESCRIPTION_CHARS]},
        ]

        def attempt() -> Any:
            try:
                return provider.complete(messages, json_mode=True)
            except Exception as exc:
                if is_rate_limited(exc) or is_permanent(exc):
                    raise
                log.info("[%s] JSON mode rejected (%s), retrying as plain text", provider.label, exc)
                return provider.complete(messages, json_mode=False)

        content = retry_with_backoff(
            attempt,
            retries=self.retries,
            base_delay=self.base_delay,
            should_retry=is_rate_limited,
            sleep=self.sleep,
        )
        return parse_model_output(content, provider.name)
