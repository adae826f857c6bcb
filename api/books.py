from __future__ import annotations

from typing import List

from flask import Blueprint, request, jsonify
from sqlalchemy import func

from api.extensions import get_storage, get_text_generator
from api.utils.pagination import parse_pagination, paginate
from models.author import Author
from models.book import Book
from models.category import Category
from models.schemas.book import (
    BookCreateSchema,
    BookUpdateSchema,
    BookOutSchema,
    GenerateDescriptionSchema,
)
from models.schemas.common import parse_bool
from services.book_insights import (
    generate_book_description,
    generate_book_summary,
    recommend_similar_books,
)
from utils.decorators import admin_required
from utils.errors import ValidationError

bp = Blueprint("books", __name__)

# Schemas
book_create_schema = BookCreateSchema()
book_update_schema = BookUpdateSchema()
book_out_schema = BookOutSchema()
books_out_schema = BookOutSchema(many=True)
generate_description_schema = GenerateDescriptionSchema()

# Sorting allowlist: API field -> SQLAlchemy column
SORT_COLUMNS = {
    "title": Book.title,
    "published_date": Book.published_date,
    "created_at": Book.created_at,
}


def parse_sort() -> List:
    sort_param = request.args.get("sort", "title")
    fields = [s.strip() for s in sort_param.split(",") if s.strip()]
    order_by = []
    for f in fields:
        desc = f.startswith("-")
        key = f[1:] if desc else f
        col = SORT_COLUMNS.get(key)
        if col is None:
            raise ValidationError(f"Unsupported sort field: {key}")
        order_by.append(col.desc() if desc else col.asc())
    return order_by if order_by else [Book.title.asc()]


def apply_filters(query):
    author_id = request.args.get("author_id")
    category_id = request.args.get("category_id")
    available = parse_bool(request.args.get("available"))
    q = request.args.get("q")

    if author_id:
        query = query.filter(Book.author_id == author_id)
    if category_id:
        query = query.filter(Book.category_id == category_id)
    if available is not None:
        query = query.filter(Book.available == available)
    if q:
        # Case-insensitive substring search on the title
        query = query.filter(func.lower(Book.title).like(f"%{q.strip().lower()}%"))
    return query


def _resolve_refs(storage, author_id=None, category_id=None):
    """Check referenced author/category exist; 400 rather than 404 since they come from the body."""
    author = category = None
    if author_id is not None:
        author = storage.get(Author, author_id)
        if author is None:
            raise ValidationError("authorId not found")
    if category_id is not None:
        category = storage.get(Category, category_id)
        if category is None:
            raise ValidationError("categoryId not found")
    return author, category


@bp.get("/books")
def list_books():
    """
    List books with pagination, sorting, filtering, and search
    ---
    tags:
      - Books
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
        description: "Comma-separated fields; prefix with '-' for desc. Allowed: title, published_date, created_at"
        default: "title"
      - in: query
        name: author_id
        type: string
      - in: query
        name: category_id
        type: string
      - in: query
        name: available
        type: boolean
      - in: query
        name: q
        type: string
        description: "Case-insensitive substring search on title"
    responses:
      200:
        description: List of books
    """
    storage = get_storage()
    page, limit = parse_pagination()
    order_by = parse_sort()

    query = apply_filters(storage.query(Book))
    rows, total = paginate(query, order_by, page, limit)

    return jsonify(
        {
            "data": books_out_schema.dump(rows),
            "meta": {
                "page": page,
                "limit": limit,
                "total": total,
                "sort": request.args.get("sort", "title"),
            },
        }
    )


@bp.get("/books/<book_id>")
def get_book(book_id: str):
    """
    Get a single book by id
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200:
        description: Book found
      404:
        description: Not found
    """
    b = get_storage().get_or_raise(Book, book_id)
    return jsonify({"data": book_out_schema.dump(b)})


@bp.post("/books")
@admin_required()
def create_book():
    """
    Create a new book (admin)
    ---
    tags:
      - Books
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
          required: [title, authorId, categoryId]
          properties:
            title: { type: string, maxLength: 255, example: Foundation }
            description: { type: string }
            publishedDate: { type: string, format: date, example: "1951-06-01" }
            authorId: { type: string }
            categoryId: { type: string }
            available: { type: boolean, default: true }
            generateDescription: { type: boolean, default: false }
    responses:
      201:
        description: Created
      400:
        description: Validation error or unknown author/category
      403:
        description: Admin role required
    """
    storage = get_storage()
    data = book_create_schema.load(request.get_json(silent=True) or {})
    author, category = _resolve_refs(storage, data["author_id"], data["category_id"])

    description = data.get("description")
    if not description and data.get("generate_description"):
        description = generate_book_description(
            get_text_generator(), data["title"], author.name, category.name
        )

    b = Book(
        title=data["title"].strip(),
        description=description,
        published_date=data.get("published_date"),
        available=data.get("available", True),
        author=author,
        category=category,
    )
    storage.new(b)
    storage.save()

    return jsonify({"data": book_out_schema.dump(b)}), 201


@bp.put("/books/<book_id>")
@admin_required()
def update_book(book_id: str):
    """
    Update a book (partial)
    ---
    tags:
      - Books
    security:
      - Bearer: []
    consumes:
      - application/json
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            title: { type: string }
            description: { type: string }
            publishedDate: { type: string, format: date }
            authorId: { type: string }
            categoryId: { type: string }
            available: { type: boolean }
    responses:
      200:
        description: Updated
      404:
        description: Not found
      400:
        description: Validation error
    """
    storage = get_storage()
    b = storage.get_or_raise(Book, book_id)
    data = book_update_schema.load(request.get_json(silent=True) or {})

    # Assign relationships, not raw ids, so the response reflects the new author/category
    author, category = _resolve_refs(storage, data.get("author_id"), data.get("category_id"))
    if author is not None:
        b.author = author
    if category is not None:
        b.category = category
    if "title" in data:
        data["title"] = data["title"].strip()

    for field in ["title", "description", "published_date", "available"]:
        if field in data:
            setattr(b, field, data[field])

    storage.new(b)
    storage.save()
    return jsonify({"data": book_out_schema.dump(b)})


@bp.delete("/books/<book_id>")
@admin_required()
def delete_book(book_id: str):
    """
    Delete a book
    ---
    tags:
      - Books
    security:
      - Bearer: []
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200:
        description: Deleted
      404:
        description: Not found
    """
    storage = get_storage()
    b = storage.get_or_raise(Book, book_id)
    storage.delete(b)
    storage.save()
    return jsonify({"message": "Book deleted successfully"})


@bp.post("/books/generate-description")
@admin_required()
def generate_description():
    """
    Generate a short description for a book that may not exist yet (admin)
    ---
    tags:
      - Books
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
          required: [title]
          properties:
            title: { type: string }
            authorName: { type: string }
            categoryName: { type: string }
    responses:
      200:
        description: Generated description (null when generation is unavailable)
    """
    data = generate_description_schema.load(request.get_json(silent=True) or {})
    description = generate_book_description(
        get_text_generator(), data["title"], data.get("author_name"), data.get("category_name")
    )
    return jsonify({"description": description})


@bp.get("/books/<book_id>/summary")
def book_summary(book_id: str):
    """
    Generated summary of a book
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200:
        description: Summary, or a fallback sentence when generation fails
      404:
        description: Not found
    """
    b = get_storage().get_or_raise(Book, book_id)
    return jsonify({"bookId": b.id, "summary": generate_book_summary(get_text_generator(), b)})


@bp.get("/books/<book_id>/recommendations")
def book_recommendations(book_id: str):
    """
    Three generated recommendations similar to a book
    ---
    tags:
      - Books
    parameters:
      - in: path
        name: book_id
        type: string
        required: true
    responses:
      200:
        description: List of {title, author}; empty when generation fails
      404:
        description: Not found
    """
    b = get_storage().get_or_raise(Book, book_id)
    return jsonify({"bookId": b.id, "recommendations": recommend_similar_books(get_text_generator(), b)})
