from pydantic import BaseModel


class Indicator(BaseModel):
    """A weekly key indicator shown on the home screen, e.g. Workout 4/7"""
    id: str
    label: str
    numerator: int = 0
    denominator: int = 7
