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

"""Settings that can only be changed within a delimited scope."""

from __future__ import annotations

import contextlib
import dataclasses
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")


@dataclasses.dataclass(init=False)
class ContextualValue(Generic[T]):
  """A process-wide setting with scoped overrides.

  Reflection helpers read their configuration (for instance the naming
  convention used to derive getter names, or the predicates that recognize
  proxy classes) from contextual values. The current value can be read from
  anywhere, but it can only be replaced for the duration of a ``with`` block,
  after which the previous value is restored:

  ::

    with properties.accessor_naming.set_scoped(
        properties.SNAKE_CASE_ACCESSORS
    ):
      properties.invoke_getter(user, "name")  # calls user.get_name()

  Overrides nest; the innermost one wins.

  Attributes:
    __module__: Module defining the setting, used when rendering it.
    __qualname__: Name of the setting within its module.
    _raw_value: The value currently in effect. Read it with `get`.
  """

  __module__: str | None
  __qualname__: str | None
  _raw_value: T

  def __init__(
      self,
      initial_value: T,
      module: str | None = None,
      qualname: str | None = None,
  ):
    self.__module__ = module
    self.__qualname__ = qualname
    self._raw_value = initial_value

  def get(self) -> T:
    """Returns the value currently in effect."""
    return self._raw_value

  @contextlib.contextmanager
  def set_scoped(self, new_value: T) -> Iterator[None]:
    """Overrides the value until the returned context manager exits.

    Args:
      new_value: Value to use inside the ``with`` block.

    Yields:
      Nothing; the override is active while the block runs.
    """
    previous = self._raw_value
    self._raw_value = new_value
    try:
      yield
    finally:
      assert self._raw_value is new_value
      self._raw_value = previous
