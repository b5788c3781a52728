"""
Bloglist — Client Package
==========================

What:  The consumer side of the API.

    api.py           BlogClient: async HTTP client for /api/login, /api/users, /api/blogs
    store.py         state records, actions, reducers and the Store container
    notification.py  Notifier: shows a message and clears it after a delay
    components.py    presentational list components rendering store entities
    actions.py       action creators and async thunks tying the pieces together

There is no module-level store: callers construct a Store and pass it to
the notifier, thunks and components that need it.
"""
