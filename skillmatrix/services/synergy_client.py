# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
HTTP client for the synergy analysis of members taking part in an interaction.

Calls an OpenAI-compatible chat-completions endpoint when ``AI_API_KEY`` is
set. Without a key, or when the call fails, a deterministic analysis computed
from the members' skills is returned instead and flagged ``simulated``.
"""
import json
from typing import Any, Optional

import httpx

from skillmatrix.core.config import Settings, settings
from skillmatrix.core.logging import get_logger
from skillmatrix.metrics.prometheus import SYNERGY_ANALYSES
from skillmatrix.schemas.common import split_labels
from skillmatrix.services.classification import normalize_key

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You analyse professional synergy between members of a skills directory. "
    "Answer with a JSON object only, with the keys strategicValue (integer 1-10), "
    "riskLevel (low, medium or high), recommendedActions (list of short strings) "
    "and summary (one paragraph)."
)


def _skill_keys(member: dict[str, Any]) -> set[str]:
    labels = split_labels(member.get("skills")) + split_labels(member.get("specialties"))
    return {normalize_key(label) for label in labels if normalize_key(label)}


def simulate_analysis(initiator: dict[str, Any], partners: list[dict[str, Any]],
                      interaction: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    """Deterministic analysis from shared and complementary skills."""
    own = _skill_keys(initiator)
    others: set[str] = set()
    for partner in partners:
        others |= _skill_keys(partner)
    shared = sorted(own & others)
    complementary = sorted(own ^ others)

    strategic_value = max(1, min(10, 3 + len(shared) + len(complementary) // 3))
    if len(shared) >= 3:
        risk_level = "low"
    elif shared:
        risk_level = "medium"
    else:
        risk_level = "high"

    actions = []
    if shared:
        actions.append(f"Build on shared expertise: {', '.join(shared[:3])}")
    if complementary:
        actions.append(f"Pair up on complementary skills: {', '.join(complementary[:3])}")
    if not partners:
        actions.append("Invite at least one member to the interaction")
    actions.append("Schedule a follow-up to measure the collaboration outcome")

    names = [m.get("name", "?") for m in [initiator, *partners]]
    title = (interaction or {}).get("title") or "this interaction"
    summary = (
        f"{', '.join(names)} share {len(shared)} skill(s) and bring "
        f"{len(complementary)} complementary skill(s) to {title}."
    )
    return {
        "strategicValue": strategic_value,
        "riskLevel": risk_level,
        "recommendedActions": actions,
        "summary": summary,
        "simulated": True,
    }


class SynergyClient:
    def __init__(self, config: Settings = settings, transport: Optional[httpx.BaseTransport] = None):
        self._config = config
        self._transport = transport

    @property
    def enabled(self) -> bool:
        return bool(self._config.AI_API_KEY)

    def analyze(self, initiator: dict[str, Any], partners: list[dict[str, Any]],
                interaction: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        if not self.enabled:
            SYNERGY_ANALYSES.labels(mode="simulated").inc()
            return simulate_analysis(initiator, partners, interaction)
        try:
            result = self._request(initiator, partners, interaction)
            SYNERGY_ANALYSES.labels(mode="ai").inc()
            return result
        except (httpx.HTTPError, ValueError, KeyError) as exc:
            logger.warning("Synergy analysis endpoint unavailable, using simulation: %s", exc)
            SYNERGY_ANALYSES.labels(mode="fallback").inc()
            return simulate_analysis(initiator, partners, interaction)

    def _request(self, initiator, partners, interaction) -> dict[str, Any]:
        def profile(member):
            return {
                "name": member.get("name"),
                "title": member.get("title"),
                "organization": member.get("organization"),
                "skills": split_labels(member.get("skills")),
                "specialties": split_labels(member.get("specialties")),
            }

        prompt = {
            "initiator": profile(initiator),
            "partners": [profile(p) for p in partners],
            "interaction": {
                k: (interaction or {}).get(k) for k in ("type", "title", "description")
            },
        }
        with httpx.Client(timeout=self._config.AI_TIMEOUT, transport=self._transport) as client:
            resp = client.post(
                self._config.AI_API_URL,
                headers={"Authorization": f"Bearer {self._config.AI_API_KEY}"},
                json={
                    "model": self._config.AI_MODEL,
                    "messages": [
                        {"role": "system", "content": SYSTEM_PROMPT},
                        {"role": "user", "content": json.dumps(prompt, ensure_ascii=False)},
                    ],
                    "temperature": 0.3,
                    "response_format": {"type": "json_object"},
                },
            )
            resp.raise_for_status()
            content = resp.json()["choices"][0]["message"]["content"]
        analysis = json.loads(content)
        if not isinstance(analysis, dict):
            raise ValueError("analysis is not a JSON object")
        analysis["simulated"] = False
        return analysis
