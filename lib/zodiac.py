# =============================================================================
# lib/zodiac.py - Zodiac Sign Lookup
# =============================================================================
# Pure date math mapping a birthday to its tropical zodiac sign. Used to
# decorate family members on the kiosk.
#
# Usage:
#   from lib.zodiac import get_zodiac_from_birthday
#   get_zodiac_from_birthday("2015-07-30")  # {"sign": "Leo", ...}
# =============================================================================

from typing import NamedTuple


class ZodiacRange(NamedTuple):
    sign: str
    symbol: str
    trait: str
    start_month: int
    start_day: int
    end_month: int
    end_day: int


# Capricorn is the only range that wraps the year boundary
ZODIAC_SIGNS: list[ZodiacRange] = [
    ZodiacRange("Capricorn", "♑", "Ambitious & disciplined", 12, 22, 1, 19),
    ZodiacRange("Aquarius", "♒", "Independent & original", 1, 20, 2, 18),
    ZodiacRange("Pisces", "♓", "Compassionate & intuitive", 2, 19, 3, 20),
    ZodiacRange("Aries", "♈", "Bold & energetic", 3, 21, 4, 19),
    ZodiacRange("Taurus", "♉", "Patient & reliable", 4, 20, 5, 20),
    ZodiacRange("Gemini", "♊", "Curious & adaptable", 5, 21, 6, 20),
    ZodiacRange("Cancer", "♋", "Nurturing & protective", 6, 21, 7, 22),
    ZodiacRange("Leo", "♌", "Confident & creative", 7, 23, 8, 22),
    ZodiacRange("Virgo", "♍", "Analytical & helpful", 8, 23, 9, 22),
    ZodiacRange("Libra", "♎", "Balanced & harmonious", 9, 23, 10, 22),
    ZodiacRange("Scorpio", "♏", "Passionate & resourceful", 10, 23, 11, 21),
    ZodiacRange("Sagittarius", "♐", "Adventurous & optimistic", 11, 22, 12, 21),
]

UNKNOWN_SIGN = {"sign": "Unknown", "symbol": "?", "trait": ""}


def _in_range(zodiac: ZodiacRange, month: int, day: int) -> bool:
    if month == zodiac.start_month and day >= zodiac.start_day:
        return True
    if month == zodiac.end_month and day <= zodiac.end_day:
        return True
    if zodiac.start_month < zodiac.end_month:
        return zodiac.start_month < month < zodiac.end_month
    return False


def get_zodiac_sign(month: int, day: int) -> dict[str, str]:
    """
    Get the zodiac sign for a month (1-12) and day (1-31).

    Returns:
        Dict with sign, symbol and trait. Month/day combinations outside
        every range (e.g. month 13) return the "Unknown" sign.
    """
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return dict(UNKNOWN_SIGN)

    for zodiac in ZODIAC_SIGNS:
        if _in_range(zodiac, month, day):
            return {"sign": zodiac.sign, "symbol": zodiac.symbol, "trait": zodiac.trait}

    return dict(UNKNOWN_SIGN)


def get_zodiac_from_birthday(birthday: str | None) -> dict[str, str] | None:
    """
    Get the zodiac sign from a "YYYY-MM-DD" birthday.

    Returns None when the string does not have three numeric parts.
    """
    if not birthday:
        return None

    parts = birthday.strip().split("-")
    if len(parts) != 3:
        return None

    try:
        month = int(parts[1])
        day = int(parts[2][:2])
    except ValueError:
        return None

    return get_zodiac_sign(month, day)
