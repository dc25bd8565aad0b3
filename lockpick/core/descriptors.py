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

"""Descriptors for types and the members they declare.

Python has no declared visibility, so visibility is derived from naming
conventions: a name like ``__balance`` is private (and stored under the
name-mangled key ``_Account__balance`` on instances of ``Account``), a name
like ``_balance`` is protected, and everything else is public.

A `TypeDescriptor` only reports the members a class declares *itself*, never
the ones it inherits. Walking a hierarchy level by level with these
descriptors keeps every member attached to the class that declared it, which
is what determines its mangled storage name and its modifiers.
"""

from __future__ import annotations

import dataclasses
import enum
import functools
import inspect
import types
import typing
from typing import Any

from lockpick.core import generics


class Visibility(enum.Enum):
  """Visibility of a name, derived from its leading underscores."""

  PUBLIC = "public"
  PROTECTED = "protected"
  PRIVATE = "private"


def is_private_name(name: str) -> bool:
  """Returns True if ``name`` is subject to private name mangling."""
  return name.startswith("__") and not name.endswith("__")


def visibility_of(name: str) -> Visibility:
  """Derives the visibility of a source-level name."""
  if is_private_name(name):
    return Visibility.PRIVATE
  elif name.startswith("_") and not name.endswith("__"):
    return Visibility.PROTECTED
  else:
    return Visibility.PUBLIC


def _mangling_prefix(owner: type) -> str | None:
  stripped = owner.__name__.lstrip("_")
  if not stripped:
    # Classes named only with underscores do not mangle their names.
    return None
  return f"_{stripped}"


def mangle_name(owner: type, name: str) -> str:
  """Returns the key under which ``owner`` stores the source name ``name``.

  Args:
    owner: The class whose body declares the name.
    name: The name as written in the class body, e.g. ``__balance``.

  Returns:
    The storage key, e.g. ``_Account__balance``. Names that are not private
    are returned unchanged.
  """
  prefix = _mangling_prefix(owner)
  if prefix is None or not is_private_name(name):
    return name
  return prefix + name


def demangle_name(owner: type, key: str) -> str:
  """Inverse of `mangle_name`: recovers the source name of a storage key."""
  prefix = _mangling_prefix(owner)
  if prefix is not None and key.startswith(prefix + "__"):
    candidate = key[len(prefix) :]
    if is_private_name(candidate):
      return candidate
  return key


@dataclasses.dataclass(frozen=True)
class Modifiers:
  """Declaration modifiers of a type or member.

  Attributes:
    visibility: Visibility derived from the declared name.
    final: Whether the member may not be reassigned after construction, i.e.
      it is annotated with `typing.Final` or declared on a frozen dataclass.
    static: Whether the member belongs to the class rather than to instances
      (`typing.ClassVar` fields, static methods and class methods).
  """

  visibility: Visibility = Visibility.PUBLIC
  final: bool = False
  static: bool = False

  @property
  def is_public(self) -> bool:
    return self.visibility is Visibility.PUBLIC


@dataclasses.dataclass(kw_only=True, eq=False)
class MemberDescriptor:
  """A field or method, attached to the class that declared it.

  Attributes:
    name: The member name as written in the declaring class body.
    declaring_type: The class whose body declares the member.
    modifiers: The member's declaration modifiers.
    accessible: Whether external access has been force-enabled. Once set, the
      flag is never cleared.
  """

  name: str
  declaring_type: type
  modifiers: Modifiers
  accessible: bool = False


@dataclasses.dataclass(kw_only=True, eq=False)
class FieldDescriptor(MemberDescriptor):
  """A field declared by a class.

  Attributes:
    attribute_name: The key the value is stored under, after name mangling.
  """

  attribute_name: str

  def __repr__(self) -> str:
    return (
        f"FieldDescriptor({self.declaring_type.__qualname__}.{self.name},"
        f" accessible={self.accessible})"
    )


@dataclasses.dataclass(kw_only=True, eq=False)
class MethodDescriptor(MemberDescriptor):
  """A method declared by a class.

  Attributes:
    definition: The object stored in the class namespace: a plain function, a
      `staticmethod` or a `classmethod`.
  """

  definition: Any

  def __repr__(self) -> str:
    return (
        f"MethodDescriptor({self.declaring_type.__qualname__}.{self.name},"
        f" accessible={self.accessible})"
    )

  @property
  def function(self) -> types.FunctionType:
    """The underlying function, with any static/class wrapper removed."""
    if isinstance(self.definition, (staticmethod, classmethod)):
      return self.definition.__func__
    return self.definition

  @functools.cached_property
  def parameter_types(self) -> tuple[Any, ...] | None:
    """The ordered parameter annotations, excluding ``self``/``cls``.

    Unannotated parameters are reported as `typing.Any`. This is None if the
    function has no inspectable signature.
    """
    try:
      signature = inspect.signature(self.function)
    except (TypeError, ValueError):
      return None
    parameters = list(signature.parameters.values())
    if not isinstance(self.definition, staticmethod):
      parameters = parameters[1:]
    return tuple(
        typing.Any
        if parameter.annotation is inspect.Parameter.empty
        else _resolve_annotation(self.function, parameter.annotation)
        for parameter in parameters
    )


def _resolve_annotation(function: Any, annotation: Any) -> Any:
  """Evaluates a single string annotation in the function's module.

  Each annotation is resolved on its own, so a name that only exists for type
  checkers (e.g. one imported under ``TYPE_CHECKING``) leaves only its own
  annotation unresolved. An unresolvable annotation is returned as its string.
  """
  if not isinstance(annotation, str):
    return annotation
  globalns = getattr(inspect.unwrap(function), "__globals__", {})
  try:
    return eval(annotation, globalns)  # pylint: disable=eval-used
  except Exception:  # pylint: disable=broad-exception-caught
    return annotation


def _own_annotations(cls: type) -> dict[str, Any]:
  try:
    return dict(inspect.get_annotations(cls))
  except Exception:  # pylint: disable=broad-exception-caught
    return dict(cls.__dict__.get("__annotations__", {}))


def _annotation_qualifier(annotation: Any) -> str | None:
  """Returns "Final" or "ClassVar" if the annotation is so qualified."""
  if isinstance(annotation, str):
    head = annotation.split("[", 1)[0].strip().rsplit(".", 1)[-1]
    return head if head in ("Final", "ClassVar") else None
  if annotation is typing.Final or typing.get_origin(annotation) is typing.Final:
    return "Final"
  if (
      annotation is typing.ClassVar
      or typing.get_origin(annotation) is typing.ClassVar
  ):
    return "ClassVar"
  return None


def _is_frozen_dataclass(cls: type) -> bool:
  params = cls.__dict__.get("__dataclass_params__")
  return bool(params is not None and params.frozen)


def _is_data_attribute(key: str, value: Any) -> bool:
  if key.startswith("__") and key.endswith("__"):
    return False
  if isinstance(value, types.MemberDescriptorType):
    return True
  return not callable(value) and not hasattr(type(value), "__get__")


@dataclasses.dataclass(frozen=True)
class TypeDescriptor:
  """One level of a type hierarchy.

  Attributes:
    type: The described class.
  """

  type: type

  @property
  def name(self) -> str:
    return self.type.__qualname__

  @property
  def supertype(self) -> TypeDescriptor | None:
    """The direct supertype, or None for the root type `object`."""
    if self.type is object or not self.type.__bases__:
      return None
    return TypeDescriptor(self.type.__bases__[0])

  @property
  def modifiers(self) -> Modifiers:
    return Modifiers(visibility=visibility_of(self.type.__name__))

  @property
  def type_arguments(self) -> tuple[Any, ...]:
    """Arguments bound to the parameterized direct supertype, if any."""
    return generics.get_class_generic_types(self.type)

  def declared_fields(self, instance: Any = None) -> dict[str, FieldDescriptor]:
    """Collects the fields declared by this class itself.

    A class declares the names it annotates, the slots it defines and the
    non-callable attributes in its own namespace. If ``instance`` is given,
    private attributes stored on it under this class's mangled prefix (which
    are usually assigned in ``__init__`` without an annotation) are also
    reported, since only this class's body could have created them.

    Args:
      instance: Optional instance whose attributes should be considered.

    Returns:
      A mapping from source-level field name to descriptor, in declaration
      order.
    """
    cls = self.type
    frozen = _is_frozen_dataclass(cls)
    fields: dict[str, FieldDescriptor] = {}

    def add(key: str, qualifier: str | None = None):
      name = demangle_name(cls, key)
      if name in fields:
        return
      fields[name] = FieldDescriptor(
          name=name,
          declaring_type=cls,
          attribute_name=key,
          modifiers=Modifiers(
              visibility=visibility_of(name),
              final=frozen or qualifier == "Final",
              static=qualifier == "ClassVar",
          ),
      )

    for key, annotation in _own_annotations(cls).items():
      add(key, _annotation_qualifier(annotation))
    for key, value in cls.__dict__.items():
      if _is_data_attribute(key, value):
        add(key)
    instance_dict = getattr(instance, "__dict__", None)
    if isinstance(instance_dict, dict):
      for key in instance_dict:
        if isinstance(key, str) and demangle_name(cls, key) != key:
          add(key)
    return fields

  def declared_methods(self) -> list[MethodDescriptor]:
    """Collects the methods declared by this class, in declaration order."""
    methods = []
    for key, value in self.type.__dict__.items():
      if isinstance(value, (staticmethod, classmethod)):
        static = True
      elif inspect.isfunction(value):
        static = False
      else:
        continue
      name = demangle_name(self.type, key)
      methods.append(
          MethodDescriptor(
              name=name,
              declaring_type=self.type,
              definition=value,
              modifiers=Modifiers(
                  visibility=visibility_of(name), static=static
              ),
          )
      )
    return methods
