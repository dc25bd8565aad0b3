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

"""Convention-based property access.

`invoke_getter` and `invoke_setter` go through accessor methods whose names
are derived from a property name (``getName``/``setName`` for ``"name"`` by
default). `get_field_value` and `set_field_value` skip accessor methods and
read or write the underlying field directly, whatever its visibility.
"""

from __future__ import annotations

import dataclasses
from typing import Any

from lockpick.core import context
from lockpick.core import errors
from lockpick.core import invocation
from lockpick.core import members


@dataclasses.dataclass(frozen=True)
class AccessorNaming:
  """Naming convention for getter and setter methods.

  Attributes:
    getter_prefix: Prefix of getter names.
    setter_prefix: Prefix of setter names.
    capitalize: Whether to upper-case the first character of the property name
      after the prefix.
  """

  getter_prefix: str = "get"
  setter_prefix: str = "set"
  capitalize: bool = True

  def _suffix(self, property_name: str) -> str:
    if self.capitalize and property_name:
      return property_name[0].upper() + property_name[1:]
    return property_name

  def getter_name(self, property_name: str) -> str:
    return self.getter_prefix + self._suffix(property_name)

  def setter_name(self, property_name: str) -> str:
    return self.setter_prefix + self._suffix(property_name)


CAMEL_CASE_ACCESSORS = AccessorNaming()
SNAKE_CASE_ACCESSORS = AccessorNaming(
    getter_prefix="get_", setter_prefix="set_", capitalize=False
)

accessor_naming: context.ContextualValue[AccessorNaming] = (
    context.ContextualValue(
        module=__name__,
        qualname="accessor_naming",
        initial_value=CAMEL_CASE_ACCESSORS,
    )
)


def invoke_getter(instance: Any, property_name: str) -> Any:
  """Calls the no-argument getter of a property.

  Args:
    instance: The object to read from.
    property_name: The property name, e.g. ``"name"`` for ``getName()``.

  Returns:
    The getter's return value.

  Raises:
    MemberResolutionError: If no getter taking no arguments exists.
  """
  getter_name = accessor_naming.get().getter_name(property_name)
  return invocation.invoke_method(instance, getter_name, (), ())


def invoke_setter(instance: Any, property_name: str, value: Any) -> None:
  """Calls the setter of a property with ``value`` as its only argument.

  The setter is matched by name only. If a hierarchy defines several setters
  with the derived name, the most derived declaration is called, regardless
  of its parameter annotations.

  Args:
    instance: The object to modify.
    property_name: The property name, e.g. ``"name"`` for ``setName(...)``.
    value: The value to pass.

  Raises:
    MemberResolutionError: If no setter exists.
  """
  setter_name = accessor_naming.get().setter_name(property_name)
  invocation.invoke_method_by_name(instance, setter_name, (value,))


def get_field_value(instance: Any, field_name: str) -> Any:
  """Reads a field directly, ignoring visibility and any getter.

  Args:
    instance: The object to read from.
    field_name: The field name as written in the declaring class body.

  Returns:
    The field's current value.

  Raises:
    MemberResolutionError: If no class in the hierarchy declares the field.
  """
  field = members.get_accessible_field(instance, field_name)
  if field is None:
    raise errors.MemberResolutionError(field_name, instance, "field")
  return invocation.read_field(instance, field)


def set_field_value(instance: Any, field_name: str, value: Any) -> None:
  """Writes a field directly, ignoring visibility, finality and any setter.

  Args:
    instance: The object to modify.
    field_name: The field name as written in the declaring class body.
    value: The value to store.

  Raises:
    MemberResolutionError: If no class in the hierarchy declares the field.
  """
  field = members.get_accessible_field(instance, field_name)
  if field is None:
    raise errors.MemberResolutionError(field_name, instance, "field")
  invocation.write_field(instance, field, value)
