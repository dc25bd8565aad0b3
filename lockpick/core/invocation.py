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

"""Reading, writing and invoking located members.

Instance fields are always read and written through their raw storage keys,
bypassing ``__getattribute__``/``__getattr__``/``__setattr__`` overrides and
frozen dataclass checks. Static fields are read and written on their
declaring class. Unlocked methods are bound from their declaring class,
bypassing subclass overrides; methods that did not need unlocking are looked
up on the instance.

Failures of the access machinery are normalized with
`errors.convert_reflection_error`. Exceptions raised by an invoked method
itself are always re-raised unchanged.
"""

from __future__ import annotations

from collections.abc import Sequence
import inspect
from typing import Any, Callable

from absl import logging
from lockpick.core import access
from lockpick.core import descriptors
from lockpick.core import errors
from lockpick.core import members


def _field_owner(instance: Any, field: descriptors.FieldDescriptor) -> Any:
  return field.declaring_type if field.modifiers.static else instance


def read_field(instance: Any, field: descriptors.FieldDescriptor | None) -> Any:
  """Returns the current value of a located field.

  Args:
    instance: The object holding the field.
    field: A descriptor returned by the locator.

  Returns:
    The field's value. If the value cannot be read even though the field was
    located (for instance because it was declared but never assigned), the
    failure is logged and None is returned.

  Raises:
    MemberResolutionError: If ``field`` is None.
  """
  if field is None:
    raise errors.MemberResolutionError(None, instance, "field")
  owner = _field_owner(instance, field)
  try:
    access.check_accessible(field)
    if owner is instance:
      return object.__getattribute__(instance, field.attribute_name)
    return getattr(owner, field.attribute_name)
  except (AttributeError, TypeError) as exc:
    logging.error("Impossible field access failure reading %r: %s", field, exc)
    return None


def write_field(
    instance: Any, field: descriptors.FieldDescriptor | None, value: Any
) -> None:
  """Assigns a new value to a located field.

  Args:
    instance: The object holding the field.
    field: A descriptor returned by the locator.
    value: The value to store.

  Raises:
    MemberResolutionError: If ``field`` is None.
  """
  if field is None:
    raise errors.MemberResolutionError(None, instance, "field")
  owner = _field_owner(instance, field)
  try:
    access.check_accessible(field)
    if owner is instance:
      object.__setattr__(instance, field.attribute_name, value)
    else:
      setattr(owner, field.attribute_name, value)
  except (AttributeError, TypeError) as exc:
    logging.error("Impossible field access failure writing %r: %s", field, exc)


def _bind_method(
    instance: Any, method: descriptors.MethodDescriptor
) -> Callable[..., Any]:
  access.check_accessible(method)
  if not method.accessible:
    return getattr(instance, method.name)
  return method.definition.__get__(instance, type(instance))


def _check_arguments(bound: Callable[..., Any], args: Sequence[Any]) -> None:
  try:
    signature = inspect.signature(bound)
  except (TypeError, ValueError):
    # No signature to check against; let the call itself decide.
    return
  signature.bind(*args)


def invoke(
    instance: Any,
    method: descriptors.MethodDescriptor | None,
    args: Sequence[Any] = (),
) -> Any:
  """Invokes a located method.

  Args:
    instance: The receiver of the call.
    method: A descriptor returned by the locator.
    args: Positional arguments for the call.

  Returns:
    Whatever the method returns.

  Raises:
    MemberResolutionError: If ``method`` is None.
    InvalidInvocationError: If the method cannot be bound to ``instance`` or
      the arguments do not fit its signature.
    UnexpectedReflectiveError: If binding fails in any other way.
    Exception: Any exception raised by the method itself, unchanged.
  """
  if method is None:
    raise errors.MemberResolutionError(None, instance, "method")
  try:
    bound = _bind_method(instance, method)
    _check_arguments(bound, args)
  except Exception as exc:  # pylint: disable=broad-exception-caught
    raise errors.convert_reflection_error(exc) from exc

  try:
    return bound(*args)
  except Exception as exc:  # pylint: disable=broad-exception-caught
    raise errors.convert_reflection_error(errors.InvocationTargetError(exc))


def invoke_method(
    instance: Any,
    method_name: str,
    parameter_types: Sequence[Any] = (),
    args: Sequence[Any] = (),
) -> Any:
  """Locates a method by signature, unlocks it and invokes it once.

  For repeated calls, resolve the method once with
  `members.get_accessible_method` and call `invoke` with the descriptor.

  Args:
    instance: The receiver of the call.
    method_name: The method name as written in the declaring class body.
    parameter_types: The parameter annotations to match, excluding ``self``.
    args: Positional arguments for the call.

  Returns:
    Whatever the method returns.

  Raises:
    MemberResolutionError: If no method matches.
  """
  method = members.get_accessible_method(instance, method_name, parameter_types)
  if method is None:
    raise errors.MemberResolutionError(method_name, instance, "method")
  return invoke(instance, method, args)


def invoke_method_by_name(
    instance: Any, method_name: str, args: Sequence[Any] = ()
) -> Any:
  """Locates a method by name only, unlocks it and invokes it once.

  Raises:
    MemberResolutionError: If no method by that name exists.
  """
  method = members.get_accessible_method_by_name(instance, method_name)
  if method is None:
    raise errors.MemberResolutionError(method_name, instance, "method")
  return invoke(instance, method, args)
