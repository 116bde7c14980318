"""JPA backend: Q-types for `@Entity`, `@Embeddable` and `@MappedSuperclass` classes."""

from querygraph.apt import run_processor
from querygraph.core import backend


@backend(name="jpa", processor="com.querydsl.apt.jpa.JPAAnnotationProcessor")
def compile_jpa(params: dict, processor: str):
    """Generates Querydsl JPA sources."""
    run_processor(params, processor)
