from fastapi import APIRouter, Request, Response
from allwork.config import settings
from allwork.modules.preferences.schemas import Theme, ThemePreference

router = APIRouter(prefix="/preferences", tags=["preferences"])

ONE_YEAR = 60 * 60 * 24 * 365


@router.get("/theme", response_model=ThemePreference)
async def get_theme(request: Request):
    """Current theme from the cookie; unknown or missing values mean system"""
    value = request.cookies.get(settings.theme_cookie_name)
    try:
        return ThemePreference(theme=Theme(value))
    except ValueError:
        return ThemePreference()


@router.put("/theme", response_model=ThemePreference)
async def set_theme(preference: ThemePreference, response: Response):
    response.set_cookie(
        settings.theme_cookie_name,
        preference.theme.value,
        max_age=ONE_YEAR,
        samesite="lax",
    )
    return preference
