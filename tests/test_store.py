"""
Bloglist — Client Store Tests
==============================

What we test:
    ✅ Reducers return new state and leave the old state untouched
    ✅ Reducers return the same object when an action changes nothing
    ✅ Duplicate ids are rejected on add and set
    ✅ Token-guarded notification clears
    ✅ Store dispatch, subscribe/unsubscribe and the re-entrancy guard
    ✅ No-op dispatches accumulate nothing; the base Record is abstract
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from bloglist.client.actions import new_anecdote, vote
from bloglist.client.store import (
    AddEntity,
    Anecdote,
    BlogRecord,
    ClearNotification,
    Notification,
    Record,
    RemoveEntity,
    SetEntities,
    SetNotification,
    State,
    Store,
    UpdateEntity,
    VoteEntity,
    entities_reducer,
    notification_reducer,
    root_reducer,
)

ANECDOTES = (
    Anecdote(id="a1", content="If it hurts, do it more often", votes=0),
    Anecdote(id="a2", content="Adding manpower to a late software project makes it later!", votes=2),
)


class TestEntitiesReducer:

    def test_vote_increments_only_the_target(self):
        before = ANECDOTES

        after = entities_reducer(before, VoteEntity(id="a1"))

        assert [a.votes for a in after] == [1, 2]
        assert after[1] is before[1]
        assert [a.votes for a in before] == [0, 2]

    def test_vote_on_blog_increments_likes(self):
        blog = BlogRecord(id="b1", title="t", url="http://example.com", likes=4)

        (after,) = entities_reducer((blog,), VoteEntity(id="b1"))

        assert after.likes == 5
        assert blog.likes == 4

    def test_unknown_ids_are_no_ops(self):
        for action in (
            VoteEntity(id="zzz"),
            RemoveEntity(id="zzz"),
            UpdateEntity(entity=Anecdote(id="zzz", content="x")),
        ):
            assert entities_reducer(ANECDOTES, action) is ANECDOTES

    def test_add_appends(self):
        action = new_anecdote("  Premature optimization is the root of all evil.  ")

        after = entities_reducer(ANECDOTES, action)

        assert len(after) == 3
        assert after[-1].content == "Premature optimization is the root of all evil."
        assert after[-1].votes == 0

    def test_add_duplicate_id_is_rejected(self):
        with pytest.raises(ValueError, match="duplicate"):
            entities_reducer(ANECDOTES, AddEntity(entity=Anecdote(id="a1", content="again")))

    def test_set_duplicate_ids_is_rejected(self):
        with pytest.raises(ValueError, match="duplicate"):
            entities_reducer((), SetEntities(entities=(ANECDOTES[0], ANECDOTES[0])))

    def test_set_replaces(self):
        assert entities_reducer(ANECDOTES, SetEntities(entities=())) == ()

    def test_update_replaces_in_place(self):
        changed = ANECDOTES[0].model_copy(update={"content": "edited"})

        after = entities_reducer(ANECDOTES, UpdateEntity(entity=changed))

        assert [a.id for a in after] == ["a1", "a2"]
        assert after[0].content == "edited"

    def test_remove(self):
        after = entities_reducer(ANECDOTES, RemoveEntity(id="a1"))

        assert [a.id for a in after] == ["a2"]

    def test_records_are_frozen(self):
        with pytest.raises(PydanticValidationError):
            ANECDOTES[0].votes = 10

    def test_base_record_cannot_be_built(self):
        with pytest.raises(TypeError):
            Record(id="r1")


class TestNotificationReducer:

    def test_set_overwrites(self):
        first = Notification(text="one", token=1)
        second = Notification(text="two", token=2)

        assert notification_reducer(first, SetNotification(notification=second)) == second

    def test_clear_with_matching_token(self):
        current = Notification(text="one", token=1)

        assert notification_reducer(current, ClearNotification(token=1)) is None

    def test_stale_clear_is_ignored(self):
        current = Notification(text="two", token=2)

        assert notification_reducer(current, ClearNotification(token=1)) is current

    def test_untargeted_clear(self):
        current = Notification(text="two", token=2)

        assert notification_reducer(current, ClearNotification()) is None


class TestRootReducer:

    def test_unchanged_state_is_the_same_object(self):
        state = State(entities=ANECDOTES)

        assert root_reducer(state, VoteEntity(id="missing")) is state
        assert root_reducer(state, ClearNotification()) is state

    def test_slices_are_independent(self):
        note = Notification(text="hi", token=1)
        state = State(entities=ANECDOTES, notification=note)

        after = root_reducer(state, vote("a2"))

        assert after is not state
        assert after.notification == note
        assert after.entities[1].votes == 3


class TestStore:

    def test_dispatch_updates_state(self):
        store = Store(initial_state=State(entities=ANECDOTES))

        store.dispatch(vote("a1"))

        assert store.state.entities[0].votes == 1
        assert store.get_state() is store.state

    def test_subscribers_see_new_state(self):
        store = Store(initial_state=State(entities=ANECDOTES))
        seen = []
        store.subscribe(seen.append)

        store.dispatch(vote("a2"))

        assert len(seen) == 1
        assert seen[0].entities[1].votes == 3

    def test_subscribers_skip_no_op_dispatch(self):
        store = Store(initial_state=State(entities=ANECDOTES))
        seen = []
        store.subscribe(seen.append)

        store.dispatch(vote("missing"))

        assert seen == []

    def test_no_op_dispatches_keep_nothing(self):
        store = Store(initial_state=State(entities=ANECDOTES))
        before = store.state
        store.subscribe(lambda state: None)
        sizes = {name: len(value) for name, value in vars(store).items() if isinstance(value, list)}

        for _ in range(1000):
            store.dispatch(vote("missing"))

        assert store.state is before
        assert {name: len(value) for name, value in vars(store).items() if isinstance(value, list)} == sizes

    def test_unsubscribe(self):
        store = Store()
        seen = []
        unsubscribe = store.subscribe(seen.append)
        unsubscribe()
        unsubscribe()

        store.dispatch(new_anecdote("something"))

        assert seen == []

    def test_reducer_may_not_dispatch(self):
        store = None

        def meddling_reducer(state, action):
            store.dispatch(action)
            return state

        store = Store(reducer=meddling_reducer)

        with pytest.raises(RuntimeError):
            store.dispatch(vote("a1"))

    def test_failed_reducer_leaves_state(self):
        store = Store(initial_state=State(entities=ANECDOTES))
        before = store.state

        with pytest.raises(ValueError):
            store.dispatch(AddEntity(entity=ANECDOTES[0]))

        assert store.state is before
        # The store is usable again afterwards
        store.dispatch(vote("a1"))
        assert store.state.entities[0].votes == 1

    def test_empty_anecdote_is_rejected(self):
        with pytest.raises(ValueError):
            new_anecdote("   ")
