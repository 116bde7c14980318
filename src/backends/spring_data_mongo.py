"""Spring Data MongoDB backend.

The processor ships with spring-data-mongodb, not with Querydsl, so it has to
be on `classpath` together with the Querydsl apt library.
"""

from querygraph.apt import run_processor
from querygraph.core import backend


@backend(
    name="springDataMongo",
    processor="org.springframework.data.mongodb.repository.support.MongoAnnotationProcessor",
)
def compile_spring_data_mongo(params: dict, processor: str):
    """Generates Querydsl sources for Spring Data `@Document` classes."""
    run_processor(params, processor)
