"""Rule-based health scoring for a single reading.

The score starts at 100 and is reduced by temperature, activity and disease
penalties. Risk factors and recommendations are derived from the same
thresholds so the three views of a reading never disagree.
"""

from __future__ import annotations

from typing import Any

from cowbelt.classifiers.reference import FEVER, HIGH_FEVER, HYPOTHERMIA, NORMAL, STRESS

DISEASE_PENALTIES = {
    HIGH_FEVER: 40,
    FEVER: 25,
    HYPOTHERMIA: 30,
    STRESS: 20,
}


def health_status(score: float) -> str:
    if score >= 80:
        return "healthy"
    if score >= 60:
        return "moderate"
    if score >= 40:
        return "poor"
    return "critical"


def overall_health(temperature: float, motion_change: float, disease: str | None = None) -> dict[str, Any]:
    score = 100

    if temperature > 40.5:
        score -= 40
    elif temperature > 39.5:
        score -= 25
    elif temperature < 36.0:
        score -= 35
    elif temperature < 37.0:
        score -= 20

    if motion_change > 200:
        score -= 20
    elif motion_change < 10:
        score -= 30
    elif motion_change < 20:
        score -= 15

    if disease and disease != NORMAL:
        score -= DISEASE_PENALTIES.get(disease, 0)

    final = max(0, score)
    return {"score": final, "status": health_status(final), "confidence": 0.85}


def risk_factors(temperature: float, motion_change: float) -> list[dict[str, str]]:
    risks: list[dict[str, str]] = []
    if temperature > 40.0:
        risks.append(
            {"factor": "High Temperature", "severity": "high", "impact": "Heat stress, dehydration, organ damage"}
        )
    if motion_change < 10:
        risks.append(
            {"factor": "Low Activity", "severity": "medium", "impact": "Potential illness, weakness, depression"}
        )
    if temperature > 39.0 and motion_change < 20:
        risks.append(
            {
                "factor": "Fever with Lethargy",
                "severity": "high",
                "impact": "Serious illness, infection, systemic problems",
            }
        )
    return risks


def recommendations(temperature: float, motion_change: float) -> list[dict[str, str]]:
    out: list[dict[str, str]] = []
    if temperature > 40.0:
        out.append(
            {
                "priority": "high",
                "action": "Immediate cooling measures",
                "description": "Provide shade, water, and ventilation. Contact veterinarian if temperature persists.",
            }
        )
    if motion_change < 15:
        out.append(
            {
                "priority": "medium",
                "action": "Monitor closely",
                "description": "Check for signs of illness, injury, or depression. Ensure adequate nutrition.",
            }
        )
    if temperature > 39.0 and motion_change < 20:
        out.append(
            {
                "priority": "critical",
                "action": "Veterinary consultation",
                "description": "Immediate veterinary attention required. Monitor vital signs continuously.",
            }
        )
    return out


def health_trend(temperature: float, motion_change: float) -> dict[str, Any]:
    if temperature > 40.0 or motion_change < 10:
        return {"trend": "declining", "confidence": 0.8}
    if temperature < 38.0 and motion_change > 50:
        return {"trend": "improving", "confidence": 0.6}
    return {"trend": "stable", "confidence": 0.7}


def analyze_health(temperature: float, motion_change: float, disease: str | None = None) -> dict[str, Any]:
    return {
        "overallHealth": overall_health(temperature, motion_change, disease),
        "riskFactors": risk_factors(temperature, motion_change),
        "recommendations": recommendations(temperature, motion_change),
        "prediction": health_trend(temperature, motion_change),
    }
