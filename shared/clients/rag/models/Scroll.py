from pydantic import BaseModel


class ScrollResult(BaseModel):
    """One page of unscored points, or every page when built by do_scroll_all()."""

    result: list[dict]
    status: str
    time: float
    # cursor of the next page, None once the last page was read
    next_page_offset: str | int | None = None


class SearchResult(BaseModel):
    """Scored points ({"id", "score", "payload"}) of a similarity search, best first."""

    result: list[dict]
    status: str
    time: float
