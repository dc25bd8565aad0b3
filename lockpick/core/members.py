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

"""Location of fields and methods across a type hierarchy.

The locator walks the declaring-type chain of an instance, from its concrete
class up to (but excluding) `object`, and at every level only considers the
members declared by that level itself. The first match wins. Nothing here
raises when a member is missing: every ``locate_*`` function returns None
instead.

The ``get_accessible_*`` variants additionally unlock the located member with
`access.ensure_accessible`, which is what callers usually want when they plan
to keep the descriptor and use it repeatedly.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from absl import logging
from lockpick.core import access
from lockpick.core import descriptors


def type_chain(cls: type) -> list[descriptors.TypeDescriptor]:
  """Builds the declaring-type chain of a class.

  Args:
    cls: The concrete class to start from.

  Returns:
    Descriptors for ``cls`` and its ancestors in method resolution order,
    excluding the root type `object`.
  """
  return [
      descriptors.TypeDescriptor(level)
      for level in cls.__mro__
      if level is not object
  ]


def locate_field(
    instance: Any, field_name: str
) -> descriptors.FieldDescriptor | None:
  """Finds the declaration of a field visible on ``instance``.

  Args:
    instance: The object to search.
    field_name: The field name as written in the declaring class body. Private
      fields are named with their leading double underscore (``"__balance"``),
      not with their mangled storage key.

  Returns:
    The descriptor of the first declaration found, walking from the concrete
    class upwards. If no class declares the name but the instance holds an
    attribute by that name, a descriptor attributed to the concrete class is
    returned. Otherwise None.
  """
  concrete = type(instance)
  claimed_keys = set()
  for level in type_chain(concrete):
    fields = level.declared_fields(instance)
    found = fields.get(field_name)
    if found is not None:
      logging.vlog(1, "Field %s found on %s", field_name, level.name)
      return found
    claimed_keys.update(field.attribute_name for field in fields.values())

  # Attributes stored under a declared field's mangled key belong to that
  # field and can only be reached through its source name.
  instance_dict = getattr(instance, "__dict__", None)
  if (
      isinstance(instance_dict, dict)
      and not descriptors.is_private_name(field_name)
      and field_name not in claimed_keys
      and field_name in instance_dict
  ):
    logging.vlog(
        1, "Field %s found as an undeclared instance attribute", field_name
    )
    return descriptors.FieldDescriptor(
        name=field_name,
        declaring_type=concrete,
        attribute_name=field_name,
        modifiers=descriptors.Modifiers(
            visibility=descriptors.visibility_of(field_name)
        ),
    )
  return None


def locate_method(
    instance: Any, method_name: str, parameter_types: Sequence[Any] = ()
) -> descriptors.MethodDescriptor | None:
  """Finds a method by name and exact parameter-type signature.

  Args:
    instance: The object to search.
    method_name: The method name as written in the declaring class body.
    parameter_types: The parameter annotations to match, in order, excluding
      ``self``/``cls``. Unannotated parameters match `typing.Any`.

  Returns:
    The first matching declaration, walking from the concrete class upwards,
    or None.
  """
  expected = tuple(parameter_types)
  for level in type_chain(type(instance)):
    for method in level.declared_methods():
      if method.name == method_name and method.parameter_types == expected:
        logging.vlog(1, "Method %s found on %s", method_name, level.name)
        return method
  return None


def locate_method_by_name(
    instance: Any, method_name: str
) -> descriptors.MethodDescriptor | None:
  """Finds a method by name alone.

  Python class namespaces hold one object per name, so within a level the
  match is unambiguous. Across levels, the most derived declaration wins.

  Args:
    instance: The object to search.
    method_name: The method name as written in the declaring class body.

  Returns:
    The first declaration found, or None.
  """
  for level in type_chain(type(instance)):
    for method in level.declared_methods():
      if method.name == method_name:
        logging.vlog(1, "Method %s found on %s", method_name, level.name)
        return method
  return None


def get_accessible_field(
    instance: Any, field_name: str
) -> descriptors.FieldDescriptor | None:
  """Locates a field and unlocks it for direct access."""
  field = locate_field(instance, field_name)
  if field is not None:
    access.ensure_accessible(field)
  return field


def get_accessible_method(
    instance: Any, method_name: str, parameter_types: Sequence[Any] = ()
) -> descriptors.MethodDescriptor | None:
  """Locates a method by signature and unlocks it for invocation.

  Use this when the method is called repeatedly: resolve it once, then pass
  the returned descriptor to `invocation.invoke` for every call.
  """
  method = locate_method(instance, method_name, parameter_types)
  if method is not None:
    access.ensure_accessible(method)
  return method


def get_accessible_method_by_name(
    instance: Any, method_name: str
) -> descriptors.MethodDescriptor | None:
  """Locates a method by name and unlocks it for invocation."""
  method = locate_method_by_name(instance, method_name)
  if method is not None:
    access.ensure_accessible(method)
  return method
