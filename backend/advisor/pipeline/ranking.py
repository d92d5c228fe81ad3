"""Relevance scoring and ranking of catalog candidates.

Two modes:
- Local: when the candidate set already fits in ``max_results`` the records
  are ordered by rating alone, no model call.
- Delegated: a projection of the first PROJECTION_LIMIT records is sent to
  the model, which returns ``[{id, score, reasons}]`` keyed by index.

Any delegated failure (no model, upstream error, unparseable or empty
response) falls back to a deterministic rating/popularity score. ``rank``
never raises.
"""

from __future__ import annotations

import json
import math
from collections.abc import Callable
from typing import Any

import structlog

from advisor.errors import UpstreamError
from advisor.models.contracts import ProductRecord, RankedRecommendation, RequirementSet
from advisor.utils.json_extract import ParseFailed, extract_json_array
from advisor.utils.llm import TextModel
from advisor.utils.prompts import render_prompt

log = structlog.get_logger("ranking")

GENERIC_REASON = "Highly rated by customers"
FALLBACK_REASON = "Based on customer ratings and popularity"
PROJECTION_LIMIT = 15
MAX_REASONS = 3
DESCRIPTION_CHARS = 200


def _clamp_score(value: float) -> float:
    return min(max(value, 0.0), 100.0)


def local_score(record: ProductRecord) -> float:
    return _clamp_score(record.rating * 20)


def fallback_score(record: ProductRecord) -> float:
    score = record.rating * 10
    if record.review_count > 0:
        score += 10 * math.log10(record.review_count)
    return _clamp_score(score)


def _rank_by(
    records: list[ProductRecord],
    score_fn: Callable[[ProductRecord], float],
    reason: str,
    max_results: int,
) -> list[RankedRecommendation]:
    scored = [(score_fn(r), r) for r in records]
    # Stable: ties keep catalog order
    scored.sort(key=lambda s: s[0], reverse=True)
    return [
        RankedRecommendation(record=record, score=round(score, 2), reasons=[reason])
        for score, record in scored[:max_results]
    ]


def _local_rank(records: list[ProductRecord], max_results: int) -> list[RankedRecommendation]:
    return _rank_by(records, local_score, GENERIC_REASON, max_results)


def _fallback_rank(records: list[ProductRecord], max_results: int) -> list[RankedRecommendation]:
    return _rank_by(records, fallback_score, FALLBACK_REASON, max_results)


# === Delegated ranking ===


def project_records(records: list[ProductRecord]) -> list[dict[str, Any]]:
    """Bounded, simplified view of the candidates for the ranking prompt."""
    return [
        {
            "id": idx,
            "name": r.name,
            "price": r.sale_price,
            "brand": r.brand,
            "rating": r.rating,
            "reviews": r.review_count,
            "description": r.short_description[:DESCRIPTION_CHARS],
        }
        for idx, r in enumerate(records[:PROJECTION_LIMIT])
    ]


def build_ranking_prompt(records: list[ProductRecord], requirements: RequirementSet) -> str:
    if len(requirements):
        requirements_text = "\n".join(f"- {q}: {a}" for q, a in requirements)
    else:
        requirements_text = "None provided"
    return render_prompt(
        "product_ranking",
        requirements=requirements_text,
        products=json.dumps(project_records(records), indent=2),
    )


def _as_score(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        if math.isnan(value):
            return None
        score = float(value)
    except OverflowError:
        return None
    return _clamp_score(score)


def _as_reasons(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    reasons = [str(r).strip() for r in value if isinstance(r, str) and r.strip()]
    return reasons[:MAX_REASONS]


def parse_ranking(
    entries: list[Any],
    records: list[ProductRecord],
    max_results: int,
) -> list[RankedRecommendation]:
    """Map model entries back to records by index.

    Entries with an out-of-range or repeated id, or a non-numeric score, are
    dropped. Survivors are ordered by score (stable) and truncated.
    """
    limit = min(len(records), PROJECTION_LIMIT)
    seen: set[int] = set()
    ranked: list[RankedRecommendation] = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        idx = entry.get("id")
        if isinstance(idx, bool) or not isinstance(idx, int) or not 0 <= idx < limit:
            continue
        if idx in seen:
            continue
        score = _as_score(entry.get("score"))
        if score is None:
            continue
        seen.add(idx)
        ranked.append(
            RankedRecommendation(
                record=records[idx],
                score=score,
                reasons=_as_reasons(entry.get("reasons")) or [GENERIC_REASON],
            )
        )
    ranked.sort(key=lambda r: r.score, reverse=True)
    return ranked[:max_results]


async def rank(
    records: list[ProductRecord],
    requirements: RequirementSet,
    max_results: int,
    model: TextModel | None = None,
) -> list[RankedRecommendation]:
    if max_results < 1 or not records:
        return []

    if len(records) <= max_results:
        return _local_rank(records, max_results)

    if model is None:
        log.info("ranking_fallback", reason="no model configured", candidates=len(records))
        return _fallback_rank(records, max_results)

    try:
        text = await model.complete(build_ranking_prompt(records, requirements))
    except UpstreamError as e:
        log.warning("ranking_fallback", reason="model request failed", error=str(e))
        return _fallback_rank(records, max_results)

    result = extract_json_array(text)
    if isinstance(result, ParseFailed):
        log.warning(
            "ranking_fallback",
            reason=result.reason,
            response_preview=result.raw_text[:200],
        )
        return _fallback_rank(records, max_results)

    ranked = parse_ranking(result.value, records, max_results)
    if not ranked:
        log.warning("ranking_fallback", reason="no usable entries", entries=len(result.value))
        return _fallback_rank(records, max_results)

    log.info(
        "ranking_complete",
        candidates=len(records),
        projected=min(len(records), PROJECTION_LIMIT),
        returned=len(ranked),
    )
    return ranked
