from typing import List, Optional
import logging
import uuid

from ..exceptions import IndicatorNotFoundError
from ..models.indicator import Indicator

logger = logging.getLogger(__name__)

DEFAULT_INDICATORS = [
    Indicator(id='1', label='Gospel Study', numerator=5, denominator=7),
    Indicator(id='2', label='Workout', numerator=4, denominator=7),
    Indicator(id='3', label='Work', numerator=20, denominator=40),
    Indicator(id='4', label='School', numerator=15, denominator=20),
]


def _parse_count(value, fallback: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return fallback


class IndicatorService:
    """Weekly key indicators on the home screen (e.g. "Workout 4/7")"""

    def __init__(self, indicators: Optional[List[Indicator]] = None):
        source = DEFAULT_INDICATORS if indicators is None else indicators
        self._indicators = [indicator.model_copy() for indicator in source]

    @property
    def indicators(self) -> List[Indicator]:
        return list(self._indicators)

    def get(self, indicator_id: str) -> Indicator:
        for indicator in self._indicators:
            if indicator.id == indicator_id:
                return indicator
        raise IndicatorNotFoundError(indicator_id)

    def _update(self, indicator_id: str, **fields) -> Indicator:
        updated = self.get(indicator_id).model_copy(update=fields)
        self._indicators = [updated if i.id == indicator_id else i for i in self._indicators]
        return updated

    def add(self) -> Indicator:
        indicator = Indicator(id=str(uuid.uuid4()), label='New Indicator', numerator=0, denominator=7)
        self._indicators.append(indicator)
        logger.debug(f"Added indicator {indicator.id}")
        return indicator

    def rename(self, indicator_id: str, label: str) -> Indicator:
        return self._update(indicator_id, label=label)

    def set_numerator(self, indicator_id: str, value) -> Indicator:
        """Set the count done so far; anything non-numeric counts as 0"""
        return self._update(indicator_id, numerator=_parse_count(value, 0))

    def set_denominator(self, indicator_id: str, value) -> Indicator:
        """Set the weekly target; non-numeric or zero falls back to 1"""
        return self._update(indicator_id, denominator=_parse_count(value, 1) or 1)

    def remove(self, indicator_id: str) -> Indicator:
        indicator = self.get(indicator_id)
        self._indicators = [i for i in self._indicators if i.id != indicator_id]
        logger.debug(f"Removed indicator {indicator_id}")
        return indicator

    @staticmethod
    def display(indicator: Indicator) -> str:
        return f"{indicator.numerator}/{indicator.denominator}"
