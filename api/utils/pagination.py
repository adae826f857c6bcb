from typing import Tuple

from flask import request

from utils.errors import ValidationError

MAX_LIMIT = 100
# SQL OFFSET is a signed 64-bit integer
MAX_OFFSET = 2**63 - 1


def parse_pagination() -> Tuple[int, int]:
    try:
        page = int(request.args.get("page", "1"))
        limit = int(request.args.get("limit", "20"))
    except ValueError:
        raise ValidationError("page and limit must be integers")
    page = max(page, 1)
    limit = max(1, min(limit, MAX_LIMIT))
    if (page - 1) * limit > MAX_OFFSET:
        raise ValidationError("page is out of range")
    return page, limit


def paginate(query, order_by, page: int, limit: int):
    """Return (rows, total) for one page of an ordered query."""
    total = query.order_by(None).count()
    rows = query.order_by(*order_by).offset((page - 1) * limit).limit(limit).all()
    return rows, total
