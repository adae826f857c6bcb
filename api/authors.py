from __future__ import annotations

from flask import Blueprint, request, jsonify
from sqlalchemy import func

from api.extensions import get_storage
from api.utils.pagination import parse_pagination, paginate
from models.author import Author
from models.book import Book
from models.schemas.author import (
    AuthorCreateSchema,
    AuthorUpdateSchema,
    AuthorOutSchema,
)
from utils.decorators import admin_required
from utils.errors import ConflictError, ValidationError

bp = Blueprint("authors", __name__)

create_schema = AuthorCreateSchema()
update_schema = AuthorUpdateSchema()
out_schema = AuthorOutSchema()
out_list_schema = AuthorOutSchema(many=True)


def parse_sort(default="name"):
    sort = request.args.get("sort", default)
    desc = sort.startswith("-")
    key = sort[1:] if desc else sort
    if key != "name":
        raise ValidationError("Unsupported sort field. Allowed: name")
    return (Author.name.desc() if desc else Author.name.asc(),)


@bp.get("/authors")
def list_authors():
    """
    List authors (supports pagination, sorting, q search)
    ---
    tags: [Authors]
    parameters:
      - in: query
        name: page
        type: integer
        default: 1
      - in: query
        name: limit
        type: integer
        default: 20
      - in: query
        name: sort
        type: string
        default: name
        description: "Allowed: name or -name"
      - in: query
        name: q
        type: string
    responses:
      200: { description: OK }
    """
    storage = get_storage()
    page, limit = parse_pagination()
    order_by = parse_sort()

    query = storage.query(Author)
    q = request.args.get("q")
    if q:
        qnorm = f"%{q.strip().lower()}%"
        query = query.filter(func.lower(Author.name).like(qnorm))

    rows, total = paginate(query, order_by, page, limit)
    return jsonify({"data": out_list_schema.dump(rows), "meta": {"page": page, "limit": limit, "total": total}})


@bp.get("/authors/<author_id>")
def get_author(author_id: str):
    """
    Get an author by id, with their books
    ---
    tags: [Authors]
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    a = get_storage().get_or_raise(Author, author_id)
    return jsonify({"data": out_schema.dump(a)})


@bp.post("/authors")
@admin_required()
def create_author():
    """
    Create an author (admin)
    ---
    tags: [Authors]
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 128, example: Isaac Asimov }
            biography: { type: string }
            birthDate: { type: string, format: date, example: "1920-01-02" }
    responses:
      201: { description: Created }
      400: { description: Validation error }
      403: { description: Admin role required }
    """
    storage = get_storage()
    data = create_schema.load(request.get_json(silent=True) or {})
    # No uniqueness on Author (names can collide)
    a = Author(name=data["name"].strip(), biography=data.get("biography"), birth_date=data.get("birth_date"))
    storage.new(a)
    storage.save()
    return jsonify({"data": out_schema.dump(a)}), 201


@bp.put("/authors/<author_id>")
@admin_required()
def update_author(author_id: str):
    """
    Update an author (partial)
    ---
    tags: [Authors]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 128 }
            biography: { type: string }
            birthDate: { type: string, format: date }
    responses:
      200: { description: OK }
      404: { description: Not found }
      400: { description: Validation error }
    """
    storage = get_storage()
    a = storage.get_or_raise(Author, author_id)
    data = update_schema.load(request.get_json(silent=True) or {})
    if "name" in data:
        a.name = data["name"].strip()
    for field in ("biography", "birth_date"):
        if field in data:
            setattr(a, field, data[field])
    storage.new(a)
    storage.save()
    return jsonify({"data": out_schema.dump(a)})


@bp.delete("/authors/<author_id>")
@admin_required()
def delete_author(author_id: str):
    """
    Delete an author that has no books
    ---
    tags: [Authors]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: author_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      400: { description: Author still has books }
      404: { description: Not found }
    """
    storage = get_storage()
    a = storage.get_or_raise(Author, author_id)
    # RESTRICT: do not allow delete while books reference the author
    if storage.query(Book).filter(Book.author_id == a.id).first():
        raise ConflictError("Cannot delete an author that still has books.")
    storage.delete(a)
    storage.save()
    return jsonify({"message": "Author deleted successfully"})
