"""
Success-or-failure results for provisioning operations.

Every fallible operation of the core returns a ``Result``: either a
``Success`` holding the produced value or a ``Failure`` holding a
``FailedOperation``, the ordered and non-empty list of problems that
explain why the operation did not succeed.

Two composition styles are available:

- ``and_then`` chains dependent steps; the first Failure short-circuits.
- ``collect`` aggregates independent outcomes; every Failure contributes
  its problems, in order.

Example:
    >>> get_name(request).and_then(lookup_workspace).map(lambda info: info.host)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from .exceptions import ProvisioningError

T = TypeVar('T')
U = TypeVar('U')


@dataclass(frozen=True)
class Problem:
    """A single reason for a failure, with optional cause and remediation hints."""

    description: str
    cause: Optional[BaseException] = None
    solutions: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'solutions', tuple(self.solutions))

    def __str__(self) -> str:
        return self.description


@dataclass(frozen=True)
class FailedOperation:
    """Ordered, non-empty collection of problems."""

    problems: Tuple[Problem, ...]

    def __post_init__(self) -> None:
        problems = tuple(self.problems)
        if not problems:
            raise ValueError("A FailedOperation requires at least one problem")
        object.__setattr__(self, 'problems', problems)

    @classmethod
    def of(cls, *problems: Problem) -> FailedOperation:
        """Build a FailedOperation from one or more problems."""
        return cls(problems)

    @property
    def messages(self) -> List[str]:
        return [problem.description for problem in self.problems]

    @property
    def solutions(self) -> List[str]:
        return [solution for problem in self.problems for solution in problem.solutions]

    def __add__(self, other: FailedOperation) -> FailedOperation:
        return FailedOperation(self.problems + other.problems)

    def __len__(self) -> int:
        return len(self.problems)

    def __str__(self) -> str:
        return "; ".join(self.messages)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Successful outcome carrying a value."""

    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def and_then(self, fn: Callable[[T], Result[U]]) -> Result[U]:
        """Feed the value into the next fallible step."""
        return fn(self.value)

    def map(self, fn: Callable[[T], U]) -> Result[U]:
        return Success(fn(self.value))

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: Any) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed outcome carrying the problems that caused it."""

    error: FailedOperation

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def and_then(self, fn: Callable[[Any], Result[U]]) -> Failure:
        return self

    def map(self, fn: Callable[[Any], U]) -> Failure:
        return self

    def unwrap(self) -> Any:
        """
        Raise the failure as an exception.

        Raises:
            ProvisioningError: always, carrying this failure's problems
        """
        raise ProvisioningError(self.error)

    def unwrap_or(self, default: U) -> U:
        return default


Result = Union[Success[T], Failure]


def failure(
    description: str,
    cause: Optional[BaseException] = None,
    solutions: Sequence[str] = (),
) -> Failure:
    """Shortcut for a Failure made of a single problem."""
    return Failure(FailedOperation.of(Problem(description, cause, tuple(solutions))))


def collect(results: Iterable[Result[T]]) -> Result[List[T]]:
    """
    Aggregate independent results.

    Every result is inspected. If any of them failed, the returned Failure
    holds the problems of all failures in input order; otherwise the
    returned Success holds the values in input order.

    Args:
        results: Outcomes of independent operations

    Returns:
        Success with all values, or Failure with all problems
    """
    values: List[T] = []
    problems: List[Problem] = []
    for result in results:
        if isinstance(result, Failure):
            problems.extend(result.error.problems)
        else:
            values.append(result.value)
    if problems:
        return Failure(FailedOperation(tuple(problems)))
    return Success(values)
