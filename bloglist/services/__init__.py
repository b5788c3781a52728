# Services package init
"""
Bloglist — Services Layer
==========================

Business logic between routes (HTTP) and the database.

Service Inventory:
    - AuthService: password hashing, login, token verification
    - BlogService: blog CRUD with creator summaries
    - UserService: registration and user listing
"""
