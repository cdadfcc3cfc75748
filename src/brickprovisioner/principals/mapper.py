"""
Resolution of platform principal references into provider identities.

A principal reference is a tagged string: ``user:<id>`` or ``group:<name>``.
User ids encode the mail address with the last ``_`` standing for ``@``
(``john.doe_example.com`` is ``john.doe@example.com``).

Each identity provider has its own ``Mapper`` implementation, registered
under an identifier and created from configuration through ``MapperFactory``.
"""

import logging
from abc import ABC, abstractmethod
from typing import Callable, ClassVar, Dict, Iterable, Optional

from brickprovisioner.common import Result, Success, failure
from brickprovisioner.config import ProvisionerConfig

logger = logging.getLogger(__name__)

USER_PREFIX = "user:"
GROUP_PREFIX = "group:"


def user_reference_to_mail(user_id: str) -> str:
    """
    Rebuild a mail address from a platform user id.

    Example:
        >>> user_reference_to_mail("john.doe_example.com")
        'john.doe@example.com'
    """
    index = user_id.rfind("_")
    if index == -1:
        return user_id
    return f"{user_id[:index]}@{user_id[index + 1:]}"


def as_group_reference(group: str) -> str:
    """Prefix a bare group name with ``group:``."""
    return group if group.startswith(GROUP_PREFIX) else f"{GROUP_PREFIX}{group}"


class Mapper(ABC):
    """
    Resolves principal references for one identity provider.

    ``map`` returns one outcome per distinct input reference. A failure on
    one reference, including an exception raised by the provider, never
    prevents the others from being resolved.
    """

    identifier: ClassVar[str]

    def map(self, subjects: Iterable[str]) -> Dict[str, Result[str]]:
        """
        Resolve a set of principal references.

        Args:
            subjects: References such as "user:john.doe_example.com" or "group:team-a"

        Returns:
            Mapping from each input reference to its own result
        """
        results: Dict[str, Result[str]] = {}
        for subject in subjects:
            if subject not in results:
                results[subject] = self._map_subject(subject)
        return results

    def _map_subject(self, subject: str) -> Result[str]:
        try:
            if subject.startswith(USER_PREFIX):
                return self.map_user(subject[len(USER_PREFIX):])
            if subject.startswith(GROUP_PREFIX):
                return self.map_group(subject[len(GROUP_PREFIX):])
        except Exception as e:
            message = f"An error occurred while mapping the subject {subject}. Details: {e}"
            logger.error(message)
            return failure(message, e)

        message = f"The subject {subject} is neither a user nor a group"
        logger.warning(message)
        return failure(message)

    @abstractmethod
    def map_user(self, user_id: str) -> Result[str]:
        """Resolve a user id (without prefix) into a provider identity."""

    @abstractmethod
    def map_group(self, group_name: str) -> Result[str]:
        """Resolve a group name (without prefix) into a provider identity."""


MapperBuilder = Callable[[ProvisionerConfig], Mapper]

_REGISTRY: Dict[str, MapperBuilder] = {}


def register_mapper(identifier: str) -> Callable[[MapperBuilder], MapperBuilder]:
    """Decorator registering a mapper builder under a provider identifier."""

    def decorator(builder: MapperBuilder) -> MapperBuilder:
        _REGISTRY[identifier.lower()] = builder
        return builder

    return decorator


class MapperFactory:
    """Creates the mapper matching a provider identifier."""

    @staticmethod
    def available() -> list:
        return sorted(_REGISTRY)

    @staticmethod
    def create(config: ProvisionerConfig, identifier: Optional[str] = None) -> Result[Mapper]:
        """
        Create a mapper.

        Args:
            config: Provisioner configuration used to build the provider clients
            identifier: Provider identifier, defaults to ``principal_mapping.provider``

        Returns:
            Success with the mapper, or Failure for an unknown identifier or a
            client that cannot be built
        """
        identifier = (identifier or config.principal_mapping.provider).lower()
        builder = _REGISTRY.get(identifier)
        if builder is None:
            message = (
                f"Unsupported principal mapping provider '{identifier}'. "
                f"Supported providers: {', '.join(MapperFactory.available())}"
            )
            logger.error(message)
            return failure(message)
        try:
            return Success(builder(config))
        except Exception as e:
            message = f"Failed to create the principal mapper '{identifier}'. Details: {e}"
            logger.error(message)
            return failure(message, e)
