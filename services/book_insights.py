"""
Prompts built from catalog data and sent through TextGenerator.
Every helper degrades to a fallback instead of failing.
"""
from __future__ import annotations

import json
import logging
from typing import Dict, List, Optional

from services.text_generation import TextGenerator

logger = logging.getLogger(__name__)

SUMMARY_FALLBACK = "Unable to generate a summary"
RECOMMENDATION_COUNT = 3


def _author_name(book) -> Optional[str]:
    author = getattr(book, "author", None)
    return getattr(author, "name", None)


def _category_name(book) -> Optional[str]:
    category = getattr(book, "category", None)
    return getattr(category, "name", None)


def generate_book_description(
    generator: TextGenerator,
    title: str,
    author_name: Optional[str] = None,
    category_name: Optional[str] = None,
) -> Optional[str]:
    prompt = (
        "You are an expert bookseller. Write a short description (2-3 sentences) for this book:\n\n"
        f"Title: {title}\n"
        f"Author: {author_name or 'Unknown'}\n"
        f"Category: {category_name or 'Not specified'}\n\n"
        "Reply with the description only, without any introduction."
    )
    return generator.generate(prompt, max_tokens=150, temperature=0.7)


def generate_book_summary(generator: TextGenerator, book) -> str:
    prompt = (
        "You are a literary critic. Here is some information about a book:\n\n"
        f"Title: {book.title}\n"
        f"Author: {_author_name(book) or 'Unknown'}\n"
        f"Category: {_category_name(book) or 'Not specified'}\n"
        f"Description: {book.description or 'No description'}\n\n"
        "Write a short, engaging summary of this book (3-4 sentences at most)."
    )
    return generator.generate(prompt, max_tokens=200, temperature=0.7, fallback=SUMMARY_FALLBACK)


def parse_recommendations(content: Optional[str]) -> List[Dict[str, str]]:
    """Keep only well-formed {title, author} entries from a JSON array; [] otherwise."""
    if not content:
        return []
    try:
        parsed = json.loads(content)
    except ValueError:
        logger.info("Recommendation output was not valid JSON")
        return []
    if not isinstance(parsed, list):
        return []

    recommendations = []
    for item in parsed:
        if not isinstance(item, dict):
            return []
        title, author = item.get("title"), item.get("author")
        if not isinstance(title, str) or not isinstance(author, str):
            return []
        recommendations.append({"title": title, "author": author})
    return recommendations[:RECOMMENDATION_COUNT]


def recommend_similar_books(generator: TextGenerator, book) -> List[Dict[str, str]]:
    prompt = (
        "You are an expert bookseller. A customer just finished this book:\n\n"
        f"Title: {book.title}\n"
        f"Author: {_author_name(book) or 'Unknown'}\n"
        f"Category: {_category_name(book) or 'Not specified'}\n\n"
        f"Recommend exactly {RECOMMENDATION_COUNT} similar books. Reply ONLY with a valid JSON array, "
        "with no text before or after:\n"
        "[\n"
        '  {"title": "Book title 1", "author": "Author 1"},\n'
        '  {"title": "Book title 2", "author": "Author 2"},\n'
        '  {"title": "Book title 3", "author": "Author 3"}\n'
        "]"
    )
    content = generator.generate(prompt, max_tokens=300, temperature=0.8, fallback="[]")
    return parse_recommendations(content)
