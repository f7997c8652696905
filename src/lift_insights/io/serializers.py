"""
JSON serialization for analysis models.

Converts dataclasses into JSON-compatible dicts for ``--json`` output.
Weights stay in kg and distances in km; datetimes become ISO strings.
"""

from datetime import date, datetime
from typing import Any

from ..core.models import (
    AnalysisResult,
    ExerciseTrend,
    IngestionMeta,
    ResolutionResult,
    SessionAnalysis,
    TimeSeries,
    TrainingEvent,
    WeightRecommendation,
)


def _iso(value: date | datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def training_event_to_dict(event: TrainingEvent) -> dict[str, Any]:
    """
    Convert TrainingEvent to JSON-compatible dict.

    Empty optional text fields are omitted.

    Args:
        event: TrainingEvent to convert

    Returns:
        Dict representation
    """
    d: dict[str, Any] = {
        "title": event.title,
        "start_time": event.start_time,
        "parsed_start": _iso(event.parsed_start),
        "exercise_title": event.exercise_title,
        "set_index": event.set_index,
        "set_type": event.set_type,
        "weight_kg": round(event.weight_kg, 3),
        "reps": event.reps,
    }
    if event.end_time:
        d["end_time"] = event.end_time
    if event.distance_km:
        d["distance_km"] = round(event.distance_km, 3)
    if event.duration_seconds:
        d["duration_seconds"] = event.duration_seconds
    if event.rpe is not None:
        d["rpe"] = event.rpe
    for key in ("description", "superset_id", "exercise_notes"):
        value = getattr(event, key)
        if value:
            d[key] = value
    return d


def ingestion_meta_to_dict(meta: IngestionMeta) -> dict[str, Any]:
    """Convert IngestionMeta to JSON-compatible dict."""
    return {
        "source_format": meta.source_format,
        "confidence": round(meta.confidence, 3),
        "row_count": meta.row_count,
        "field_mappings": dict(meta.field_mappings),
        "unmatched_exercises": list(meta.unmatched_exercises),
        "fuzzy_matches": meta.fuzzy_matches,
        "representative_matches": meta.representative_matches,
        "warnings": list(meta.warnings),
    }


def resolution_to_dict(raw_name: str, result: ResolutionResult) -> dict[str, Any]:
    return {"input": raw_name, "name": result.name, "method": result.method, "matched": result.matched}


def time_series_to_dict(series: TimeSeries) -> dict[str, Any]:
    """
    Convert TimeSeries to JSON-compatible dict.

    Set counts are rounded to one decimal, as displayed.
    """
    return {
        "keys": list(series.keys),
        "data": [
            {
                "timestamp": entry.timestamp,
                "label": entry.label,
                "values": {k: round(v, 1) for k, v in entry.values.items()},
            }
            for entry in series.data
        ],
    }


def analysis_result_to_dict(result: AnalysisResult) -> dict[str, Any]:
    """
    Convert AnalysisResult to JSON-compatible dict.

    Args:
        result: AnalysisResult to convert

    Returns:
        Dict representation; ``explanation`` is None when absent
    """
    explanation = None
    if result.explanation is not None:
        explanation = {
            "trend_value": result.explanation.trend_value,
            "direction": result.explanation.direction,
            "why": list(result.explanation.why),
            "improve": list(result.explanation.improve),
        }
    return {
        "transition": result.transition,
        "status": result.status,
        "metrics": dict(result.metrics),
        "short_message": result.short_message,
        "tooltip": result.tooltip,
        "explanation": explanation,
    }


def session_analysis_to_dict(analysis: SessionAnalysis | None) -> dict[str, Any] | None:
    if analysis is None:
        return None
    return {
        "goal_label": analysis.goal_label,
        "avg_reps": analysis.avg_reps,
        "set_count": analysis.set_count,
        "tooltip": analysis.tooltip,
    }


def recommendation_to_dict(rec: WeightRecommendation | None) -> dict[str, Any] | None:
    if rec is None:
        return None
    return {"kind": rec.kind, "message": rec.message, "tooltip": rec.tooltip}


def exercise_trend_to_dict(trend: ExerciseTrend) -> dict[str, Any]:
    """Convert ExerciseTrend to JSON-compatible dict."""
    d: dict[str, Any] = {
        "status": trend.status,
        "is_bodyweight_like": trend.is_bodyweight_like,
        "confidence": trend.confidence,
        "diff_pct": round(trend.diff_pct, 2) if trend.diff_pct is not None else None,
        "evidence": list(trend.evidence),
    }
    if trend.plateau is not None:
        d["plateau"] = {
            "weight": trend.plateau.weight,
            "min_reps": trend.plateau.min_reps,
            "max_reps": trend.plateau.max_reps,
        }
    return d
