# staynest/schemas/base.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIModel(BaseModel):
    """
    Shared config: read from ORM objects, speak camelCase on the wire,
    accept snake_case on input too.
    """

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageOut(APIModel):
    message: str
