"""
Flask CLI commands.

    flask --app api seed    # admin user plus a small sample catalog; safe to rerun
"""
from datetime import date

import click
from flask import current_app

from api.extensions import get_storage
from models.author import Author
from models.book import Book
from models.category import Category
from models.user import Role, User
from utils.security import hash_password

SAMPLE_AUTHORS = [
    {"name": "Isaac Asimov", "biography": "American science fiction writer", "birth_date": date(1920, 1, 2)},
    {"name": "Victor Hugo", "biography": "French writer of the 19th century", "birth_date": date(1802, 2, 26)},
]

SAMPLE_CATEGORIES = ["Science Fiction", "Novel"]

SAMPLE_BOOKS = [
    {
        "title": "Foundation",
        "description": "First volume of the Foundation series",
        "published_date": date(1951, 6, 1),
        "author": "Isaac Asimov",
        "category": "Science Fiction",
    },
    {
        "title": "Les Misérables",
        "description": "Historical and social novel",
        "published_date": date(1862, 4, 3),
        "author": "Victor Hugo",
        "category": "Novel",
    },
]


def seed_database(storage, admin_email: str, admin_password: str) -> dict:
    """Insert whatever part of the sample data is missing; returns counts of rows created."""
    created = {"users": 0, "authors": 0, "categories": 0, "books": 0}

    if not storage.find_by(User, email=admin_email):
        storage.new(User(email=admin_email, password_hash=hash_password(admin_password), role=Role.ADMIN))
        created["users"] += 1

    authors = {}
    for sample in SAMPLE_AUTHORS:
        author = storage.find_by(Author, name=sample["name"])
        if author is None:
            author = Author(**sample)
            storage.new(author)
            created["authors"] += 1
        authors[sample["name"]] = author

    categories = {}
    for name in SAMPLE_CATEGORIES:
        category = storage.find_by(Category, name=name)
        if category is None:
            category = Category(name=name)
            storage.new(category)
            created["categories"] += 1
        categories[name] = category

    for sample in SAMPLE_BOOKS:
        if storage.find_by(Book, title=sample["title"]):
            continue
        storage.new(
            Book(
                title=sample["title"],
                description=sample["description"],
                published_date=sample["published_date"],
                available=True,
                author=authors[sample["author"]],
                category=categories[sample["category"]],
            )
        )
        created["books"] += 1

    storage.save()
    return created


def register_commands(app):
    @app.cli.command("seed")
    def seed():
        """Seed the database with an admin user and a sample catalog."""
        created = seed_database(
            get_storage(),
            current_app.config["ADMIN_EMAIL"],
            current_app.config["ADMIN_PASSWORD"],
        )
        click.echo("Seeding finished: " + ", ".join(f"{v} {k}" for k, v in created.items()))
