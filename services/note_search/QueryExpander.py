"""Query expansion.

Turns one free-text query into a set of variants (date formats, single
keywords, note-section phrasings) so that both retrieval legs see the forms a
note is likely to use. Pure and table-driven; the only input besides the query
is the date used for the year of date variants.
"""

import re
from datetime import date

MONTH_CODES: dict[str, str] = {
    "january": "01", "february": "02", "march": "03", "april": "04",
    "may": "05", "june": "06", "july": "07", "august": "08",
    "september": "09", "october": "10", "november": "11", "december": "12",
}

STOP_WORDS: frozenset[str] = frozenset({
    "the", "and", "for", "from", "about", "can", "you", "tell", "anything", "notes",
})

# trigger word (searched in the lower-cased query) -> literal variants
CONTEXT_VARIANTS: dict[str, tuple[str, ...]] = {
    "meeting": ("## Meetings", "Meetings & Appointments", "meeting notes", "appointment", "Meeting", "meetings"),
    "daily": ("daily note", "## Daily", "Daily", "today"),
    "appointment": ("## Appointments", "meeting", "schedule", "Appointment"),
}

MIN_KEYWORD_LENGTH = 3

_DATE_PATTERN = re.compile(
    r"\b(" + "|".join(MONTH_CODES) + r")\s+(\d{1,2})(?:st|nd|rd|th)?\b"
)


def date_variants(query: str, today: date | None = None) -> list[str]:
    """Return the date spellings for the first "<Month> <Day>" in the query.

    Args:
        query (str): The user query.
        today (date | None): Supplies the year; defaults to the local date.

    Returns:
        list[str]: e.g. for "July 4th" in 2025: ["07-04", "2025-07-04", "07/04",
            "0704", "20250704", "July 4", "July-4", "04", "07"]. Empty when
            the query names no date.
    """
    match = _DATE_PATTERN.search(query.lower())
    if not match:
        return []

    month_name, raw_day = match.group(1), match.group(2)
    month = MONTH_CODES[month_name]
    day = raw_day.zfill(2)
    year = (today or date.today()).year
    display_month = month_name.capitalize()

    return [
        f"{month}-{day}",
        f"{year}-{month}-{day}",
        f"{month}/{day}",
        f"{month}{day}",
        f"{year}{month}{day}",
        f"{display_month} {raw_day}",
        f"{display_month}-{raw_day}",
        day,
        month,
    ]


def keyword_variants(query: str) -> list[str]:
    """Every lower-cased word of at least MIN_KEYWORD_LENGTH chars that is not a stop word."""
    return [
        word for word in query.lower().split()
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ]


def expand_query(query: str, today: date | None = None) -> set[str]:
    """Expand a query into its set of search variants.

    Args:
        query (str): The user query. Always part of the result.
        today (date | None): Supplies the year for date variants.

    Returns:
        set[str]: Deduplicated variants; iteration order carries no meaning.
    """
    lower_query = query.lower()
    variants: set[str] = {query}

    dates = date_variants(query, today=today)
    variants.update(dates)
    variants.update(keyword_variants(query))

    for trigger, extra in CONTEXT_VARIANTS.items():
        if trigger in lower_query:
            variants.update(extra)

    if dates and "meeting" in lower_query:
        month_day = dates[0]
        variants.update({
            f"{month_day} meeting",
            f"{month_day} Meeting",
            f"Meeting {month_day}",
            f"meeting {month_day}",
        })

    return variants
