"""Hibernate backend.

Same entity model as JPA, but the processor also understands Hibernate's own
annotations (`@Type`, `@CollectionOfElements`, ...).
"""

from querygraph.apt import run_processor
from querygraph.core import backend


@backend(
    name="hibernate",
    processor="com.querydsl.apt.hibernate.HibernateAnnotationProcessor",
)
def compile_hibernate(params: dict, processor: str):
    """Generates Querydsl Hibernate sources."""
    run_processor(params, processor)
