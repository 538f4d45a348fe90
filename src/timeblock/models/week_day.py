from datetime import date
from pydantic import BaseModel


class WeekDay(BaseModel):
    """One column of the week strip; recomputed whenever the reference date changes"""
    weekday_name: str
    day_of_month: int
    full_date: date
    is_selected: bool = False
