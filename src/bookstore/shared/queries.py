"""Helpers for walking Protean query sets."""

BATCH_SIZE = 100


def fetch_all(queryset, batch_size=BATCH_SIZE):
    """Every record matched by ``queryset``, loaded in batches.

    Query sets are limited by default, so a plain ``.all()`` can silently
    truncate large result sets.
    """
    records = []
    offset = 0
    while True:
        result = queryset.offset(offset).limit(batch_size).all()
        records.extend(result.items)
        offset += batch_size
        if offset >= result.total:
            return records


def fetch_page(queryset, page=0, page_size=20, order_by="-created_at"):
    return queryset.order_by(order_by).offset(page * page_size).limit(page_size).all().items
