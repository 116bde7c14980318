from querygraph.apt import run_processor
from querygraph.core import backend


@backend(
    name="roo",
    processor="com.querydsl.apt.roo.RooAnnotationProcessor",
    description="Generates Querydsl sources for Spring Roo entities.",
)
def compile_roo(params: dict, processor: str):
    run_processor(params, processor)
