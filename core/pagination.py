import math

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


def normalize_paging(page, page_size):
    """Clamp page/page_size the way the mobile clients expect"""
    try:
        page = int(page)
    except (TypeError, ValueError):
        page = 1
    try:
        page_size = int(page_size)
    except (TypeError, ValueError):
        page_size = DEFAULT_PAGE_SIZE

    if page < 1:
        page = 1
    if page_size < 1:
        page_size = DEFAULT_PAGE_SIZE
    elif page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE
    return page, page_size


def paginate(items, page, page_size, total_count=None):
    """
    Slice ``items`` into one page.

    When ``total_count`` is given, ``items`` is taken to be the already
    sliced page (e.g. a queryset window) and is returned as is.
    """
    if total_count is None:
        total_count = len(items)
        start = (page - 1) * page_size
        items = items[start:start + page_size]

    total_pages = math.ceil(total_count / page_size) if page_size else 0
    return {
        'items': list(items),
        'total_count': total_count,
        'page': page,
        'page_size': page_size,
        'total_pages': total_pages,
        'has_next_page': page < total_pages,
        'has_previous_page': page > 1,
    }
