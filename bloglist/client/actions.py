"""
Bloglist — Action Creators & Thunks
====================================

What:  Functions that build store actions, and async "thunks" that call the
       API and then dispatch.
How:   Plain action creators return an action for the caller to dispatch.
       Thunks take the Store, Notifier and BlogClient explicitly, perform the
       request, dispatch the result, and report success or failure through
       the notifier. API failures are shown as error notifications and the
       thunk returns None; the store is left as it was.
"""

import logging
import uuid
from typing import List, Optional

from bloglist.client.api import ApiError, BlogClient
from bloglist.client.notification import Notifier
from bloglist.client.store import (
    AddEntity,
    Anecdote,
    BlogRecord,
    RemoveEntity,
    SetEntities,
    Store,
    UpdateEntity,
    VoteEntity,
)

logger = logging.getLogger(__name__)

NOTIFY_SECONDS = 5.0


# ── Anecdotes ─────────────────────────────────────────────────────────────

def new_anecdote(content: str) -> AddEntity:
    """An AddEntity for a fresh anecdote with zero votes."""
    content = content.strip()
    if not content:
        raise ValueError("anecdote content must not be empty")
    return AddEntity(entity=Anecdote(id=uuid.uuid4().hex, content=content, votes=0))


def vote(anecdote_id: str) -> VoteEntity:
    return VoteEntity(id=anecdote_id)


def submit_anecdote(
    store: Store,
    notifier: Notifier,
    content: str,
    seconds: float = NOTIFY_SECONDS,
) -> Anecdote:
    """Add an anecdote from the create form and announce it."""
    action = new_anecdote(content)
    store.dispatch(action)
    notifier.show(f"you created '{action.entity.content}'", seconds)
    return action.entity


def vote_and_notify(
    store: Store,
    notifier: Notifier,
    anecdote: Anecdote,
    seconds: float = NOTIFY_SECONDS,
) -> None:
    store.dispatch(vote(anecdote.id))
    notifier.show(f"you voted '{anecdote.content}'", seconds)


# ── Blogs ─────────────────────────────────────────────────────────────────

async def initialize_blogs(store: Store, client: BlogClient) -> List[BlogRecord]:
    """Replace the store's entities with the server's blog list."""
    blogs = await client.get_all()
    store.dispatch(SetEntities(entities=tuple(blogs)))
    return blogs


async def create_blog(
    store: Store,
    notifier: Notifier,
    client: BlogClient,
    title: str,
    url: str,
    author: Optional[str] = None,
) -> Optional[BlogRecord]:
    try:
        blog = await client.create(title=title, url=url, author=author)
    except ApiError as e:
        logger.warning("create blog failed: %s", e)
        notifier.show(e.message, kind="error")
        return None

    store.dispatch(AddEntity(entity=blog))
    byline = f" by {blog.author}" if blog.author else ""
    notifier.show(f"a new blog {blog.title}{byline} added")
    return blog


async def like_blog(
    store: Store,
    notifier: Notifier,
    client: BlogClient,
    blog: BlogRecord,
) -> Optional[BlogRecord]:
    """PUT likes + 1 and store the server's answer."""
    try:
        updated = await client.update(blog.voted())
    except ApiError as e:
        logger.warning("like blog %s failed: %s", blog.id, e)
        notifier.show(e.message, kind="error")
        return None

    store.dispatch(UpdateEntity(entity=updated))
    notifier.show(f"you liked '{updated.title}'")
    return updated


async def remove_blog(
    store: Store,
    notifier: Notifier,
    client: BlogClient,
    blog: BlogRecord,
) -> bool:
    try:
        await client.remove(blog.id)
    except ApiError as e:
        logger.warning("remove blog %s failed: %s", blog.id, e)
        notifier.show(e.message, kind="error")
        return False

    store.dispatch(RemoveEntity(id=blog.id))
    notifier.show(f"removed '{blog.title}'")
    return True
