"""Principal mappers, one per identity provider."""

from .azure_mapper import AzureMapper
from .databricks_mapper import DatabricksMapper
from .mapper import (
    GROUP_PREFIX,
    USER_PREFIX,
    Mapper,
    MapperFactory,
    as_group_reference,
    register_mapper,
    user_reference_to_mail,
)

__all__ = [
    "AzureMapper",
    "DatabricksMapper",
    "GROUP_PREFIX",
    "Mapper",
    "MapperFactory",
    "USER_PREFIX",
    "as_group_reference",
    "register_mapper",
    "user_reference_to_mail",
]
