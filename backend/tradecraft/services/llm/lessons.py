"""
Starter lesson options, offered before the assistant has said anything.
"""

from tradecraft.schemas.chart import LessonOption

_STARTER_LESSON_PAYLOADS = [
    {
        "id": "add-macd",
        "title": "Add MACD Indicator",
        "description": "Display the MACD indicator on the chart",
        "actions": [
            {"type": "ADD_INDICATOR", "indicator": "MACD", "params": {"fast": 12, "slow": 26, "signal": 9}},
        ],
    },
    {
        "id": "add-rsi",
        "title": "Add RSI Indicator",
        "description": "Display the RSI indicator on the chart",
        "actions": [
            {"type": "ADD_INDICATOR", "indicator": "RSI", "params": {"period": 14}},
        ],
    },
    {
        "id": "add-ema",
        "title": "Add EMA Overlay",
        "description": "Display a 20-period EMA on the price chart",
        "actions": [
            {"type": "ADD_INDICATOR", "indicator": "EMA", "params": {"period": 20}},
        ],
    },
]

STARTER_LESSONS: list[LessonOption] = [
    LessonOption.model_validate(payload) for payload in _STARTER_LESSON_PAYLOADS
]


def get_starter_lesson(lesson_id: str):
    for lesson in STARTER_LESSONS:
        if lesson.id == lesson_id:
            return lesson
    return None
