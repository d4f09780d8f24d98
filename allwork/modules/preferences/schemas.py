from pydantic import BaseModel
from enum import Enum


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    PRIDE = "pride"
    SYSTEM = "system"


class ThemePreference(BaseModel):
    theme: Theme = Theme.SYSTEM
