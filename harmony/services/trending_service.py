"""
Trending topics computed from hashtags in post content.
"""

import re
from collections import Counter, defaultdict
from typing import List

from harmony.models import Post

HASHTAG_RE = re.compile(r"#(\w+)")


def extract_hashtags(content: str) -> List[str]:
    return HASHTAG_RE.findall(content)


def trending_topics(posts: List[Post], limit: int = 5) -> List[dict]:
    """
    Count hashtags case-insensitively across posts.

    Each topic reports how many posts used it and how many distinct authors.
    Ties keep first-seen order, with posts given newest first.
    """
    counts = Counter()
    authors = defaultdict(set)
    display = {}

    for post in posts:
        for tag in set(t.lower() for t in extract_hashtags(post.content)):
            counts[tag] += 1
            authors[tag].add(post.user_id)
        for tag in extract_hashtags(post.content):
            display.setdefault(tag.lower(), tag)

    topics = []
    for index, (tag, related) in enumerate(counts.most_common(limit), start=1):
        label = display[tag]
        topics.append({
            "id": index,
            "title": label,
            "hashtag": f"#{label}",
            "related_posts": related,
            "professionals": len(authors[tag]),
        })
    return topics
