"""
Blog-style sample application showcasing blazemarshal capabilities.
"""

from .demo import bootstrap_manager, edit_drafts, fetch_recent_posts, run_demo, seed_sample_data
from .models import Author, Category, Post

__all__ = [
    "Author",
    "Category",
    "Post",
    "bootstrap_manager",
    "edit_drafts",
    "seed_sample_data",
    "fetch_recent_posts",
    "run_demo",
]
