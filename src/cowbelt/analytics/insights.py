from __future__ import annotations

from typing import Any

PRIORITY_ORDER = {"critical": 4, "high": 3, "medium": 2, "low": 1}


def generate_health_insights(temperature: float | None, motion_change: float | None, disease: str | None = None) -> list[dict[str, Any]]:
    insights: list[dict[str, Any]] = []

    if temperature is not None and temperature >= 39.5:
        insights.append(
            {
                "category": "temperature",
                "insight": "Elevated body temperature indicates potential fever or heat stress",
                "recommendation": "Monitor closely and consider veterinary consultation",
                "priority": "high",
            }
        )

    if motion_change is not None and motion_change < 10:
        insights.append(
            {
                "category": "activity",
                "insight": "Low activity level may indicate lethargy or illness",
                "recommendation": "Check for signs of illness or injury",
                "priority": "medium",
            }
        )

    if temperature is not None and motion_change is not None and temperature > 39.0 and motion_change < 15:
        insights.append(
            {
                "category": "health",
                "insight": "Combination of elevated temperature and low activity suggests potential illness",
                "recommendation": "Immediate veterinary attention recommended",
                "priority": "critical",
            }
        )

    return insights


def max_priority(insights: list[dict[str, Any]]) -> int:
    return max((PRIORITY_ORDER.get(i.get("priority"), 0) for i in insights), default=0)
