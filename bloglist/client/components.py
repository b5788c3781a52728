"""
Bloglist — List Rendering Components
=====================================

What:  Presentational components for the store's entities.
How:   A component takes the entity list and the callbacks for its actions,
       renders one child Node per entity keyed by the entity id, and binds
       each child's actions to the callbacks. Components never touch the
       store; whoever renders them decides what a vote or delete does.

    anecdote_list(anecdotes, on_vote)          → ListNode of "content / has N votes [vote]"
    blog_list(blogs, on_like, on_delete=None)  → ListNode of "title author / likes N [like] [remove]"
    notification_view(notification)            → str | None

Rendering output is a plain tree that can be flattened to text lines.
"""

from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from bloglist.client.store import Anecdote, BlogRecord, Notification, Record

Callback = Callable[[Any], Any]


class Node:
    """One rendered entity: a key, its text and its named actions."""

    def __init__(self, key: str, text: str, actions: Optional[Dict[str, Callable[[], Any]]] = None):
        self.key = key
        self.text = text
        self.actions = actions or {}

    def trigger(self, action: str) -> Any:
        """Invoke a bound action; returns whatever the callback returns."""
        try:
            handler = self.actions[action]
        except KeyError:
            raise KeyError(f"node '{self.key}' has no action '{action}'") from None
        return handler()

    def lines(self) -> List[str]:
        buttons = " ".join(f"[{name}]" for name in self.actions)
        return [f"{self.text} {buttons}".rstrip()]

    def __repr__(self) -> str:
        return f"<Node key={self.key!r} text={self.text!r}>"


class ListNode:
    """An ordered collection of keyed children."""

    def __init__(self, children: Sequence[Node], title: Optional[str] = None):
        keys = [child.key for child in children]
        if len(keys) != len(set(keys)):
            duplicates = sorted({k for k in keys if keys.count(k) > 1})
            raise ValueError(f"duplicate keys in list: {duplicates}")
        self.children = list(children)
        self.title = title

    @property
    def keys(self) -> List[str]:
        return [child.key for child in self.children]

    def child(self, key: str) -> Node:
        for node in self.children:
            if node.key == key:
                return node
        raise KeyError(key)

    def trigger(self, key: str, action: str) -> Any:
        return self.child(key).trigger(action)

    def lines(self) -> List[str]:
        out = [self.title] if self.title else []
        for node in self.children:
            out.extend(node.lines())
        return out

    def __len__(self) -> int:
        return len(self.children)


def _bind(callback: Callback, entity: Record) -> Callable[[], Any]:
    return lambda: callback(entity)


def entity_list(
    entities: Iterable[Record],
    render: Callable[[Record], str],
    actions: Dict[str, Callback],
    title: Optional[str] = None,
) -> ListNode:
    """Render each entity with `render` and bind every action to it."""
    children = [
        Node(
            key=entity.id,
            text=render(entity),
            actions={name: _bind(callback, entity) for name, callback in actions.items()},
        )
        for entity in entities
    ]
    return ListNode(children, title=title)


def anecdote_list(anecdotes: Iterable[Anecdote], on_vote: Callback) -> ListNode:
    return entity_list(
        anecdotes,
        render=lambda a: f"{a.content} / has {a.votes} votes",
        actions={"vote": on_vote},
        title="Anecdotes",
    )


def blog_list(
    blogs: Iterable[BlogRecord],
    on_like: Callback,
    on_delete: Optional[Callback] = None,
) -> ListNode:
    """Blogs with a like button, and a remove button when on_delete is given."""
    actions: Dict[str, Callback] = {"like": on_like}
    if on_delete is not None:
        actions["remove"] = on_delete

    def render(blog: BlogRecord) -> str:
        byline = f" {blog.author}" if blog.author else ""
        return f"{blog.title}{byline} / likes {blog.likes}"

    return entity_list(blogs, render=render, actions=actions, title="blogs")


def notification_view(notification: Optional[Notification]) -> Optional[str]:
    if notification is None:
        return None
    prefix = "error: " if notification.kind == "error" else ""
    return f"{prefix}{notification.text}"
