"""Backend modules live here.

Each module declares one Querydsl backend by decorating its action with
`@querygraph.core.backend(name=..., processor=...)`. The flag of the same
name in the configuration turns the backend's task on.
"""
