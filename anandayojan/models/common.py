from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# models/common.py
class CamelModel(BaseModel):
    """Accepts and emits camelCase keys, as the web client sends them."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
