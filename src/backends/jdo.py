from querygraph.apt import run_processor
from querygraph.core import backend


@backend(name="jdo", processor="com.querydsl.apt.jdo.JDOAnnotationProcessor")
def compile_jdo(params: dict, processor: str):
    """Generates Querydsl JDO sources for `@PersistenceCapable` classes."""
    run_processor(params, processor)
