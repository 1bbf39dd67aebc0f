from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelBody(BaseModel):
    """Request body whose JSON keys are the camelCase form of the field names."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
