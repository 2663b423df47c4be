"""Result types returned by the validation steps of a tool call."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class ErrorKind(str, Enum):
	"""Why a tool call could not produce its normal output."""
	CONFIGURATION = "configuration"
	INVALID_REQUEST = "invalid_request"
	UNKNOWN_TOOL = "unknown_tool"
	INVALID_ARGUMENTS = "invalid_arguments"
	INTERNAL = "internal"


@dataclass(frozen=True)
class DispatchError:
	"""A content-level failure, reported to the client with isError set."""
	kind: ErrorKind
	message: str

	def to_text(self) -> str:
		# Unknown tools are reported bare, everything else carries the prefix
		if self.kind is ErrorKind.UNKNOWN_TOOL:
			return self.message
		return f"Error: {self.message}"


@dataclass(frozen=True)
class Ok(Generic[T]):
	value: T


@dataclass(frozen=True)
class Err:
	error: DispatchError


Result = Union[Ok[T], Err]


def err(kind: ErrorKind, message: str) -> Err:
	"""Shorthand for building a failed result."""
	return Err(DispatchError(kind, message))
