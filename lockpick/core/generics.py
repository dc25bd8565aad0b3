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

"""Extraction of type arguments bound on a class's supertype.

Given

::

  class UserRepository(Repository[User, int]):
    ...

`get_class_generic_type` returns ``User`` for index 0 and ``int`` for index 1.
Only the *direct* parameterized supertype is inspected. This is a best-effort
lookup: whenever the information is unavailable, the sentinel `object` is
returned and a `TypeArgumentWarning` is emitted instead of raising.

The warning goes through the standard `warnings` filters. Under the default
filter a repeated miss from the same call site is reported only once; install
an ``"always"`` filter for `errors.TypeArgumentWarning` to see every miss.
"""

from __future__ import annotations

import types
import typing
from typing import Any
import warnings

from lockpick.core import errors


def _direct_parameterized_base(cls: type) -> Any | None:
  """Returns the first original base of ``cls`` that is not Generic/Protocol.

  ``__orig_bases__`` is looked up in the class's own namespace, since the
  attribute is otherwise inherited from whichever ancestor last set it.
  """
  for base in cls.__dict__.get("__orig_bases__", cls.__bases__):
    if typing.get_origin(base) in (typing.Generic, typing.Protocol):
      continue
    if base in (typing.Generic, typing.Protocol):
      continue
    return base
  return None


def get_class_generic_types(cls: type) -> tuple[Any, ...]:
  """Returns the type arguments bound to the direct supertype of ``cls``.

  Args:
    cls: The class to inspect.

  Returns:
    The arguments, exactly as written in the class statement, or an empty
    tuple if the direct supertype is not parameterized.
  """
  base = _direct_parameterized_base(cls)
  if base is None or typing.get_origin(base) is None:
    return ()
  return typing.get_args(base)


def _is_concrete_class(argument: Any) -> bool:
  return (
      isinstance(argument, type)
      and not isinstance(argument, types.GenericAlias)
      and typing.get_origin(argument) is None
  )


def get_class_generic_type(cls: type, index: int = 0) -> type:
  """Returns the concrete class bound to a supertype's type parameter.

  Args:
    cls: The class to inspect, e.g. ``UserRepository`` declared as
      ``class UserRepository(Repository[User, int])``.
    index: Position of the type argument.

  Returns:
    The class at position ``index``, or `object` if the direct supertype is
    not parameterized, if ``index`` is out of range, or if the argument is not
    a concrete class (e.g. a `typing.TypeVar` or a parameterized alias).
  """
  base = _direct_parameterized_base(cls)
  if base is None or typing.get_origin(base) is None:
    warnings.warn(
        f"{cls.__name__}'s superclass is not a parameterized type",
        errors.TypeArgumentWarning,
        stacklevel=2,
    )
    return object

  arguments = typing.get_args(base)
  if index < 0 or index >= len(arguments):
    warnings.warn(
        f"Index: {index}, Size of {cls.__name__}'s parameterized type:"
        f" {len(arguments)}",
        errors.TypeArgumentWarning,
        stacklevel=2,
    )
    return object

  argument = arguments[index]
  if not _is_concrete_class(argument):
    warnings.warn(
        f"{cls.__name__} does not bind a concrete class to type parameter"
        f" {index} of its superclass (got {argument!r})",
        errors.TypeArgumentWarning,
        stacklevel=2,
    )
    return object
  return argument
