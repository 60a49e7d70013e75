from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class PayloadModel(BaseModel):
    """
    Base for every schema that arrives from the session layer.

    Payload keys are camelCase on the wire; snake_case names are accepted too.
    Instances are frozen once validated.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )
