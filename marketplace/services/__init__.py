"""
High-level use cases for the marketplace API.

Each service orchestrates a resource store (and the session registry) to
implement the business rules. Routers call these services instead of touching
stores or sessions directly.
"""
