from querygraph.apt import run_processor
from querygraph.core import backend


@backend(name="morphia", processor="com.querydsl.apt.morphia.MorphiaAnnotationProcessor")
def compile_morphia(params: dict, processor: str):
    """Generates Querydsl Morphia (MongoDB) sources."""
    run_processor(params, processor)
