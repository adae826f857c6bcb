from __future__ import annotations

from flask import Blueprint, request, jsonify
from sqlalchemy import func

from api.extensions import get_storage
from api.utils.pagination import parse_pagination, paginate
from models.book import Book
from models.category import Category
from models.schemas.category import (
    CategoryCreateSchema,
    CategoryUpdateSchema,
    CategoryOutSchema,
)
from utils.decorators import admin_required
from utils.errors import ConflictError, ValidationError

bp = Blueprint("categories", __name__)

create_schema = CategoryCreateSchema()
update_schema = CategoryUpdateSchema()
out_schema = CategoryOutSchema()
out_list_schema = CategoryOutSchema(many=True)


def parse_sort(default="name"):
    sort = request.args.get("sort", default)
    desc = sort.startswith("-")
    key = sort[1:] if desc else sort
    if key != "name":
        raise ValidationError("Unsupported sort field. Allowed: name")
    return (Category.name.desc() if desc else Category.name.asc(),)


def _ensure_unique_name(storage, name: str, exclude_id: str | None = None):
    """Case-insensitive uniqueness check on name."""
    query = storage.query(Category).filter(func.lower(Category.name) == name.lower())
    if exclude_id:
        query = query.filter(Category.id != exclude_id)
    if query.first():
        raise ConflictError("Category name already exists.")


@bp.get("/categories")
def list_categories():
    """
    List categories
    ---
    tags: [Categories]
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
      - in: query
        name: q
        type: string
    responses:
      200: { description: OK }
    """
    storage = get_storage()
    page, limit = parse_pagination()
    order_by = parse_sort()

    query = storage.query(Category)
    q = request.args.get("q")
    if q:
        query = query.filter(func.lower(Category.name).like(f"%{q.strip().lower()}%"))

    rows, total = paginate(query, order_by, page, limit)
    return jsonify({"data": out_list_schema.dump(rows), "meta": {"page": page, "limit": limit, "total": total}})


@bp.get("/categories/<category_id>")
def get_category(category_id: str):
    """
    Get a category by id, with its books
    ---
    tags: [Categories]
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: OK }
      404: { description: Not found }
    """
    c = get_storage().get_or_raise(Category, category_id)
    return jsonify({"data": out_schema.dump(c)})


@bp.post("/categories")
@admin_required()
def create_category():
    """
    Create a category (admin)
    ---
    tags: [Categories]
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
            name: { type: string, maxLength: 64, example: Science Fiction }
    responses:
      201: { description: Created }
      400: { description: Validation error or duplicate name }
    """
    storage = get_storage()
    data = create_schema.load(request.get_json(silent=True) or {})
    name = data["name"].strip()
    _ensure_unique_name(storage, name)
    c = Category(name=name)
    storage.new(c)
    storage.save()
    return jsonify({"data": out_schema.dump(c)}), 201


@bp.put("/categories/<category_id>")
@admin_required()
def update_category(category_id: str):
    """
    Rename a category
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name: { type: string, maxLength: 64 }
    responses:
      200: { description: OK }
      400: { description: Validation error or duplicate name }
      404: { description: Not found }
    """
    storage = get_storage()
    c = storage.get_or_raise(Category, category_id)
    data = update_schema.load(request.get_json(silent=True) or {})
    if "name" in data:
        name = data["name"].strip()
        _ensure_unique_name(storage, name, exclude_id=c.id)
        c.name = name
    storage.new(c)
    storage.save()
    return jsonify({"data": out_schema.dump(c)})


@bp.delete("/categories/<category_id>")
@admin_required()
def delete_category(category_id: str):
    """
    Delete a category that has no books
    ---
    tags: [Categories]
    security:
      - Bearer: []
    parameters:
      - in: path
        name: category_id
        type: string
        required: true
    responses:
      200: { description: Deleted }
      400: { description: Category still has books }
      404: { description: Not found }
    """
    storage = get_storage()
    c = storage.get_or_raise(Category, category_id)
    if storage.query(Book).filter(Book.category_id == c.id).first():
        raise ConflictError("Cannot delete a category that still has books.")
    storage.delete(c)
    storage.save()
    return jsonify({"message": "Category deleted successfully"})
