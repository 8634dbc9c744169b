"""Natural-language prompt -> ChartSpec via the OpenAI chat completions API."""

from __future__ import annotations

import json
import logging

import requests

from .config import CHART_KINDS, GROUP_BYS, OPENAI_CHAT_URL, OPENAI_MODEL, REQUEST_TIMEOUT_SECONDS, X_AXES, Y_AXES
from .models import ChartSpec

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a chart generator for Linear issues. Available fields: id, title, createdAt, "
    "completedAt, state{{type}}, assignee{{name}}, creator{{name}}, priority, labels{{name}}, team{{name}}, "
    "cycle{{name,number}}, estimate.\n"
    'User wants: "{prompt}"\n'
    "Respond ONLY with valid JSON: "
    '{{"type": "{kinds}", "title": "string", "xAxis": "{x_axes}", "yAxis": "{y_axes}", '
    '"groupBy": "{groups}|null", "filter": "type=bug&state=started"}} '
    "where filter is optional and uses keys type, state, assignee, creator, cycle, severity, "
    "priority, labels, projectId."
)


def build_system_prompt(prompt: str) -> str:
    return SYSTEM_PROMPT.format(
        prompt=prompt,
        kinds="|".join(CHART_KINDS),
        x_axes="|".join(X_AXES),
        y_axes="|".join(Y_AXES),
        groups="|".join(GROUP_BYS),
    )


class ChartSpecGenerator:
    def __init__(
        self,
        api_key: str,
        model: str = OPENAI_MODEL,
        url: str = OPENAI_CHAT_URL,
        *,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ):
        if not api_key:
            raise ValueError("OpenAI API key is required")
        self.model = model
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {api_key}"})

    def generate(self, prompt: str) -> ChartSpec:
        body = {
            "model": self.model,
            "temperature": 0.2,
            "response_format": {"type": "json_object"},
            "messages": [
                {"role": "system", "content": build_system_prompt(prompt)},
                {"role": "user", "content": prompt},
            ],
        }
        try:
            resp = self.session.post(self.url, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RuntimeError(f"OpenAI request failed: {exc}") from exc
        if resp.status_code >= 400:
            raise RuntimeError(f"OpenAI error {resp.status_code}: {resp.text[:200]}")
        choices = resp.json().get("choices") or []
        content = ((choices[0] if choices else {}).get("message") or {}).get("content")
        if not content:
            raise RuntimeError("OpenAI returned empty content")
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise RuntimeError("OpenAI returned invalid JSON") from exc
        if not isinstance(payload, dict):
            raise RuntimeError("OpenAI returned a non-object chart spec")
        logger.debug("Chart spec for prompt %r: %s", prompt, payload)
        return ChartSpec.from_payload(payload)
