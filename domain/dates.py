"""Domain calendar-day helpers — pure functions, zero external dependencies.

Trip dates are plain calendar days (year, month, day) with no time zone.
Strings are only parsed or produced here, at the boundary.

Only stdlib imports allowed.
"""

from datetime import date, datetime, timedelta


def parse_jour(value):
    """Parse a calendar day from a date, datetime or ``YYYY-MM-DD`` string.

    Returns None when the value cannot be read as a day.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if len(text) < 10:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def format_jour(jour):
    return jour.isoformat()


def format_court(jour):
    """Short ``DD/MM`` label used on trend axes."""
    return f"{jour.day:02d}/{jour.month:02d}"


def cle_mois(jour):
    return f"{jour.year:04d}-{jour.month:02d}"


def fenetre_jours(ancre, nb_jours):
    """Return the ``nb_jours`` consecutive days ending at ``ancre`` inclusive, oldest first."""
    if nb_jours <= 0:
        return []
    return [ancre - timedelta(days=offset) for offset in range(nb_jours - 1, -1, -1)]


def meme_mois(jour, annee, mois):
    return jour.year == annee and jour.month == mois
