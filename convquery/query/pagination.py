"""Sort, page bounds and the combined page + count stage."""

from typing import Any, Dict, List, Optional

from ..models.conversation import ConversationPage
from ..models.filters import SortKey, UNBOUNDED_PAGE_SIZE


_SORT_FIELDS = {
    SortKey.UPDATED_AT_ASC: ("updatedAt", 1),
    SortKey.UPDATED_AT_DESC: ("updatedAt", -1),
}


def create_sort_object(sort: Optional[str]) -> Optional[Dict[str, int]]:
    """Sort document for a supported key, None for anything else."""
    try:
        field, order = _SORT_FIELDS[SortKey(sort)]
    except ValueError:
        return None
    return {field: order}


def sort_stage(sort: Optional[str]) -> Dict[str, Any]:
    """``$sort`` stage with ``_id`` as tie-breaker so pages never overlap."""
    sort_object = create_sort_object(sort) or {}
    return {"$sort": {**sort_object, "_id": 1}}


def bounded_page_number(page: int, page_size: int) -> int:
    """Page number clamped by the page size (1 when unbounded).

    Pages past ``page_size`` repeat page ``page_size`` when there are more
    pages than the page size.
    """
    upper = page_size if page_size > UNBOUNDED_PAGE_SIZE else 1
    return min(upper, page)


def facet_stage(page: int, page_size: int) -> Dict[str, Any]:
    """Compute the requested page and the total count in one pass."""
    unbounded = page_size == UNBOUNDED_PAGE_SIZE
    skip = 0 if unbounded else (bounded_page_number(page, page_size) - 1) * page_size
    page_stages: List[Dict[str, Any]] = [{"$skip": skip}]
    if not unbounded:
        page_stages.append({"$limit": page_size})
    return {
        "$facet": {
            "conversations": page_stages,
            "pages": [{"$count": "numberOfDocuments"}],
        }
    }


def shape_page(results: List[Dict[str, Any]], page_size: int) -> ConversationPage:
    """
    Turn the facet output into ``{conversations, pages}``.

    An empty page returns ``pages=0`` without reading the count facet.
    """
    facet = results[0] if results else {}
    conversations = facet.get("conversations") or []
    if not conversations:
        return ConversationPage(conversations=[], pages=0)

    if page_size == UNBOUNDED_PAGE_SIZE:
        return ConversationPage(conversations=conversations, pages=1)

    counts = facet.get("pages") or []
    total = counts[0]["numberOfDocuments"] if counts else len(conversations)
    return ConversationPage(conversations=conversations, pages=-(-total // page_size))
