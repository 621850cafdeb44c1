"""
Utility helpers for running the blazemarshal blog example end-to-end.
"""

from __future__ import annotations

from typing import Any, Dict, List

from blazemarshal import Manager

from .models import RELATIONS, TYPES

AUTHORS = [
    {"id": 1, "name": "Alice Carter", "email": "alice@example.com", "bio": "Editor-in-chief."},
    {"id": 2, "name": "Brian Kim", "email": "brian@example.com", "bio": "Performance specialist."},
]

CATEGORIES = [
    {"id": 1, "name": "Announcements", "description": "Release notes and launch news."},
    {"id": 2, "name": "Guides", "description": "Deep dives and tutorials."},
]

POSTS = [
    {
        "id": 1,
        "title": "Introducing blazemarshal",
        "body": "This guide walks through loading records into an identity map.",
        "published": True,
        "author_id": 1,
        "category_id": 1,
    },
    {
        "id": 2,
        "title": "Indexing hot fields",
        "body": "Index the fields you look up often to avoid full scans.",
        "published": True,
        "author_id": 2,
        "category_id": 2,
    },
    {
        "id": 3,
        "title": "Tracking changes",
        "body": "Snapshots tell you which fields changed since load.",
        "published": False,
        "author_id": 1,
        "category_id": 2,
    },
]


def bootstrap_manager() -> Manager:
    """
    Create a manager with the blog types and relations declared.
    """

    return Manager(types=TYPES, relations=RELATIONS)


def seed_sample_data(manager: Manager) -> Dict[str, int]:
    """
    Load authors, categories, and posts as raw records.
    """

    manager["author"].load_collection(AUTHORS)
    manager["category"].load_collection(CATEGORIES)
    manager["post"].load_collection(POSTS)
    return {name: len(manager[name].get_identity_values()) for name in ("author", "category", "post")}


def fetch_recent_posts(manager: Manager, limit: int = 5) -> List[Dict[str, Any]]:
    """
    Return published posts, newest first, with author and category names.
    """

    posts = manager["post"]
    published = posts.get_collection_by_field("published", [True])
    feed = []
    for post in sorted(published, key=lambda item: item.id, reverse=True)[:limit]:
        author = posts.get_related(post, "author")
        category = posts.get_related(post, "category")
        feed.append(
            {
                "id": post.id,
                "title": post.title,
                "summary": post.summary(),
                "published": post.published,
                "author_name": author.name if author else None,
                "category_name": category.name if category else None,
            }
        )
    return feed


def edit_drafts(manager: Manager) -> Dict[Any, Dict[str, Any]]:
    """
    Publish every draft and report what changed per post.
    """

    posts = manager["post"]
    for post in posts.get_collection_by_field("published", [False]):
        post.published = True
    return {
        identity: posts.get_changed_fields(post)
        for identity, post in posts.get_changed_entities().items()
    }


def run_demo() -> List[Dict[str, Any]]:
    manager = bootstrap_manager()
    seed_sample_data(manager)
    return fetch_recent_posts(manager)


if __name__ == "__main__":  # pragma: no cover
    for entry in run_demo():
        print(f"{entry['title']} by {entry['author_name']} in {entry['category_name']}")
