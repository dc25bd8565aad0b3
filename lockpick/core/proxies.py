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

"""Unwrapping of dynamically generated proxy subclasses.

Interception frameworks often wrap an object by generating a subclass of its
class at runtime (``RealService$$EnhancerByProxy$$1f2e``). Code that branches
on the type of such an object wants the class it was generated from, not the
synthesized one. `get_user_class` recovers it.

Whether a class is a generated proxy is decided by predicates. The default
recognizes the ``$$`` marker that bytecode-generation proxy libraries put in
their class names; other proxy mechanisms can be supported by adding
predicates to `proxy_type_predicates`.

A proxy that cannot be unwrapped is reported with `errors.ProxyUnwrapWarning`,
subject to the standard `warnings` filters.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable
import warnings

from lockpick.core import context
from lockpick.core import errors

ProxyTypePredicate = Callable[[type], bool]

PROXY_CLASS_SEPARATOR = "$$"


def name_marker_predicate(marker: str) -> ProxyTypePredicate:
  """Builds a predicate matching classes whose name contains ``marker``."""

  def has_marker(cls: type) -> bool:
    return marker in cls.__qualname__

  has_marker.__qualname__ = f"name_marker_predicate({marker!r})"
  return has_marker


proxy_type_predicates: context.ContextualValue[
    tuple[ProxyTypePredicate, ...]
] = context.ContextualValue(
    module=__name__,
    qualname="proxy_type_predicates",
    initial_value=(name_marker_predicate(PROXY_CLASS_SEPARATOR),),
)


def is_proxy_type(
    cls: type, predicates: Sequence[ProxyTypePredicate] | None = None
) -> bool:
  """Returns True if any proxy predicate recognizes ``cls``."""
  if predicates is None:
    predicates = proxy_type_predicates.get()
  return any(predicate(cls) for predicate in predicates)


def get_user_class(
    instance: Any, predicates: Sequence[ProxyTypePredicate] | None = None
) -> type:
  """Returns the class an instance was declared with, looking through proxies.

  Args:
    instance: A possibly-proxied object.
    predicates: Proxy predicates to use instead of the configured ones.

  Returns:
    The direct superclass of the instance's class if that class is a
    generated proxy and its superclass is not `object`; otherwise the
    instance's own class.
  """
  cls = type(instance)
  if not is_proxy_type(cls, predicates):
    return cls
  supertype = cls.__bases__[0] if cls.__bases__ else None
  if supertype is not None and supertype is not object:
    return supertype
  warnings.warn(
      f"{cls.__qualname__} looks like a generated proxy class but has no"
      " superclass to unwrap to",
      errors.ProxyUnwrapWarning,
      stacklevel=2,
  )
  return cls
