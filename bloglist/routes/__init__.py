# Routes package init
"""
Bloglist — API Routes Package
==============================

Route Inventory:
    - auth.py:    POST /api/login                (token issue) + bearer dependency
    - users.py:   POST /api/users, GET /api/users
    - blogs.py:   GET/POST /api/blogs, GET/PUT/DELETE /api/blogs/{id}
    - health.py:  GET  /health

Routes stay thin: extract input, call a service, choose the status code.
"""
