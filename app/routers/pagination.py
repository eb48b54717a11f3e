from app.models.journal import PageLink, Pagination


def build_pagination(page: int, limit: int, total: int) -> Pagination:
    start_index = (page - 1) * limit
    end_index = page * limit

    pagination = Pagination()
    if end_index < total:
        pagination.next = PageLink(page=page + 1, limit=limit)
    if start_index > 0:
        pagination.prev = PageLink(page=page - 1, limit=limit)
    return pagination
