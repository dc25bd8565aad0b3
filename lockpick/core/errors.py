# Copyright 2024 The Lockpick Authors.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Exceptions and warnings raised by reflective access.

All failures of the reflection layer are funneled through
`convert_reflection_error`, which maps the different ways an access can go
wrong onto a small taxonomy:

* `MemberResolutionError`: the named member does not exist anywhere in the
  target's type hierarchy.
* `InvalidInvocationError`: the invocation mechanism itself rejected the call.
* `UnexpectedReflectiveError`: anything else.

Failures raised *by* an invoked method are not part of the taxonomy; they are
re-raised to the caller unchanged.
"""

from __future__ import annotations

import reprlib
from typing import Any


def describe_target(target: Any) -> str:
  """Builds a short, never-failing description of a target instance."""
  try:
    return reprlib.repr(target)
  except Exception:  # pylint: disable=broad-exception-caught
    return f"<{type(target).__qualname__} object at {hex(id(target))}>"


class ReflectionError(Exception):
  """Base class for all errors raised by the reflection layer."""


class MemberResolutionError(ReflectionError, ValueError):
  """A named field or method could not be found on a target.

  Attributes:
    member_name: The name that was searched for, or None if the caller passed
      an unresolved descriptor.
    target: The instance whose type hierarchy was searched.
    kind: Either "field" or "method".
  """

  def __init__(self, member_name: str | None, target: Any, kind: str):
    self.member_name = member_name
    self.target = target
    self.kind = kind
    if member_name is None:
      message = (
          f"No {kind} was resolved for target [{describe_target(target)}];"
          f" locate the {kind} before accessing it."
      )
    else:
      message = (
          f"Could not find {kind} [{member_name}] on target"
          f" [{describe_target(target)}]"
      )
    super().__init__(message)


class InvalidInvocationError(ReflectionError, TypeError):
  """The invocation mechanism rejected a call.

  Raised for wrong argument shapes, denied access, or a member that vanished
  between resolution and invocation.
  """


class UnexpectedReflectiveError(ReflectionError, RuntimeError):
  """Wraps a failure that fits no other category of the taxonomy."""


class InvocationTargetError(ReflectionError):
  """Carries an exception raised by an invoked method itself.

  This is only used as input to `convert_reflection_error`, which unwraps it
  back into the original exception. Callers never see it.

  Attributes:
    target_error: The exception raised by the callee.
  """

  def __init__(self, target_error: BaseException):
    super().__init__(target_error)
    self.target_error = target_error


class TypeArgumentWarning(UserWarning):
  """Type argument metadata could not be determined."""


class ProxyUnwrapWarning(UserWarning):
  """A class was recognized as a proxy but could not be unwrapped."""


def convert_reflection_error(error: BaseException) -> BaseException:
  """Normalizes a failure from reflective dispatch.

  Args:
    error: The exception caught around a reflective operation.

  Returns:
    The exception that should be raised to the caller. For an
    `InvocationTargetError` this is the callee's own exception, unchanged.
    Errors already in the taxonomy are returned as-is. Failures of the access
    mechanism become `InvalidInvocationError`, and all others become
    `UnexpectedReflectiveError`; in both cases the original exception is set
    as the ``__cause__``.
  """
  if isinstance(error, InvocationTargetError):
    return error.target_error
  if isinstance(error, ReflectionError):
    return error
  if isinstance(error, (AttributeError, TypeError, ValueError, LookupError)):
    converted = InvalidInvocationError(str(error))
  else:
    converted = UnexpectedReflectiveError(
        f"Unexpected reflection failure: {error!r}"
    )
  converted.__cause__ = error
  return converted
