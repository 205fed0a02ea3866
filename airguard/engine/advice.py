from __future__ import annotations

from typing import List

from airguard.engine.schemas import TrendLabel

VENTILATE = "Tilt windows open for 5-10 min or cross-ventilate"
CLOSE_WINDOWS = "Close windows and check for indoor sources"
HEPA_ON = "Turn on the HEPA purifier"
REDUCE_VOC = "Ventilate and cut back on fragrance or cleaning products"
HEAT_UP = "Raise the heating slightly"
COOL_DOWN = "Use shading or cooling"
HUMIDIFY = "Run a humidifier on low"
DEHUMIDIFY = "Dehumidify or ventilate more"


# Thresholds are tuned for actionability and intentionally differ from the score curves.
def build_advice(key: str, value: float, trend: TrendLabel) -> List[str]:
    if key == "co2":
        if value >= 2000 or value >= 1500 or (value >= 1000 and trend == "rising"):
            return [VENTILATE]
        return []
    if key == "pm25":
        if value > 35:
            return [CLOSE_WINDOWS, HEPA_ON]
        if value > 12:
            return [CLOSE_WINDOWS]
        return []
    if key == "tvoc":
        if value > 220:
            return [REDUCE_VOC]
        return []
    if key == "temp":
        if value < 20:
            return [HEAT_UP]
        if value > 24:
            return [COOL_DOWN]
        return []
    if key == "rh":
        if value < 35:
            return [HUMIDIFY]
        if value > 60:
            return [DEHUMIDIFY]
        return []
    return []
