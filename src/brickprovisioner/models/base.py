"""
Base model for descriptor and provisioning objects.

Descriptors are authored in camelCase; models expose snake_case attributes
and accept either spelling on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseProvisionerModel(BaseModel):
    """
    Base model for all descriptor objects with common configuration.

    Unknown descriptor fields are ignored so that newer descriptor versions
    stay readable by this provisioner.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,  # Allow field population by name
        use_enum_values=False,  # Keep enums as enum objects
        str_strip_whitespace=True,
        extra="ignore",
    )
