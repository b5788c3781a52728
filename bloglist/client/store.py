"""
Bloglist — Client Store
========================

What:  Redux-style state container for the client: an ordered list of entity
       records (anecdotes or blogs) plus one current notification.
How:   State, records and actions are frozen pydantic models. A reducer is a
       pure function (state, action) -> state that returns new objects and
       never mutates the old ones; it returns the same object when nothing
       changed. Store.dispatch() runs the reducer and then calls subscribers.

State shape:
    State
    ├── entities:     tuple of Record (unique ids, display order)
    └── notification: Notification | None

Actions:
    SetEntities, AddEntity, UpdateEntity, VoteEntity, RemoveEntity,
    SetNotification, ClearNotification
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict

from bloglist.schemas.blog import UserSummary

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Records
# ══════════════════════════════════════════════════════════════════════════

class Record(BaseModel, ABC):
    """Base of every entity held in the store; `id` is its unique key."""
    model_config = ConfigDict(frozen=True)

    id: str

    @abstractmethod
    def voted(self) -> "Record":
        """A copy with one more vote. Each record type decides what that means."""


class Anecdote(Record):
    content: str
    votes: int = 0

    def voted(self) -> "Anecdote":
        return self.model_copy(update={"votes": self.votes + 1})


class BlogRecord(Record):
    """A blog as the client sees it (the shape of the API's BlogResponse)."""
    title: str
    author: Optional[str] = None
    url: str
    likes: int = 0
    user: Optional[UserSummary] = None

    def voted(self) -> "BlogRecord":
        return self.model_copy(update={"likes": self.likes + 1})


class Notification(BaseModel):
    """
    The message currently on screen.

    `token` identifies the show() call that produced it, so a delayed clear
    meant for an older message cannot remove a newer one.
    """
    model_config = ConfigDict(frozen=True)

    text: str
    kind: Literal["info", "error"] = "info"
    token: int = 0


class State(BaseModel):
    model_config = ConfigDict(frozen=True)

    entities: Tuple[Record, ...] = ()
    notification: Optional[Notification] = None


# ══════════════════════════════════════════════════════════════════════════
# Actions
# ══════════════════════════════════════════════════════════════════════════

class _Action(BaseModel):
    model_config = ConfigDict(frozen=True)


class SetEntities(_Action):
    type: Literal["entities/set"] = "entities/set"
    entities: Tuple[Record, ...] = ()


class AddEntity(_Action):
    type: Literal["entities/add"] = "entities/add"
    entity: Record


class UpdateEntity(_Action):
    type: Literal["entities/update"] = "entities/update"
    entity: Record


class VoteEntity(_Action):
    type: Literal["entities/vote"] = "entities/vote"
    id: str


class RemoveEntity(_Action):
    type: Literal["entities/remove"] = "entities/remove"
    id: str


class SetNotification(_Action):
    type: Literal["notification/set"] = "notification/set"
    notification: Notification


class ClearNotification(_Action):
    type: Literal["notification/clear"] = "notification/clear"
    # None clears whatever is shown; otherwise only the matching notification
    token: Optional[int] = None


Action = Union[
    SetEntities,
    AddEntity,
    UpdateEntity,
    VoteEntity,
    RemoveEntity,
    SetNotification,
    ClearNotification,
]


# ══════════════════════════════════════════════════════════════════════════
# Reducers
# ══════════════════════════════════════════════════════════════════════════

def _check_unique(entities: Tuple[Record, ...]) -> None:
    seen = set()
    for entity in entities:
        if entity.id in seen:
            raise ValueError(f"duplicate entity id '{entity.id}'")
        seen.add(entity.id)


def entities_reducer(entities: Tuple[Record, ...], action: Action) -> Tuple[Record, ...]:
    """Reduce the entity list. Unknown ids in update/vote/remove are no-ops."""
    if isinstance(action, SetEntities):
        _check_unique(action.entities)
        return tuple(action.entities)

    if isinstance(action, AddEntity):
        if any(e.id == action.entity.id for e in entities):
            raise ValueError(f"duplicate entity id '{action.entity.id}'")
        return entities + (action.entity,)

    if isinstance(action, UpdateEntity):
        if not any(e.id == action.entity.id for e in entities):
            return entities
        return tuple(action.entity if e.id == action.entity.id else e for e in entities)

    if isinstance(action, VoteEntity):
        if not any(e.id == action.id for e in entities):
            return entities
        return tuple(e.voted() if e.id == action.id else e for e in entities)

    if isinstance(action, RemoveEntity):
        remaining = tuple(e for e in entities if e.id != action.id)
        return entities if len(remaining) == len(entities) else remaining

    return entities


def notification_reducer(
    notification: Optional[Notification], action: Action
) -> Optional[Notification]:
    if isinstance(action, SetNotification):
        return action.notification

    if isinstance(action, ClearNotification):
        if notification is None:
            return None
        if action.token is not None and action.token != notification.token:
            return notification
        return None

    return notification


def root_reducer(state: State, action: Action) -> State:
    """Combine the slice reducers; returns `state` itself when nothing changed."""
    entities = entities_reducer(state.entities, action)
    notification = notification_reducer(state.notification, action)
    if entities is state.entities and notification is state.notification:
        return state
    return State(entities=entities, notification=notification)


# ══════════════════════════════════════════════════════════════════════════
# Store
# ══════════════════════════════════════════════════════════════════════════

Listener = Callable[[State], None]
Reducer = Callable[[State, Action], State]


class Store:
    """
    Holds the current State and applies actions through a reducer.

    Dispatch is synchronous. Subscribers run after each dispatch that
    changed the state, in subscription order. Dispatching from inside the
    reducer is an error.
    """

    def __init__(
        self,
        reducer: Reducer = root_reducer,
        initial_state: Optional[State] = None,
    ):
        self._reducer = reducer
        self._state = initial_state or State()
        self._listeners: List[Listener] = []
        self._dispatching = False

    @property
    def state(self) -> State:
        return self._state

    def get_state(self) -> State:
        return self._state

    def dispatch(self, action: Action) -> State:
        if self._dispatching:
            raise RuntimeError("Reducers may not dispatch actions")

        self._dispatching = True
        try:
            new_state = self._reducer(self._state, action)
        finally:
            self._dispatching = False

        logger.debug("dispatch %s", action.type)

        if new_state is self._state:
            return self._state
        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register `listener`; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
