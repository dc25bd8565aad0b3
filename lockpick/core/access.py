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

"""Accessibility override for located members.

A member that is not reachable through ordinary attribute access from outside
its class (a name-mangled private member, a member of a non-public class, or a
field that cannot be reassigned) is unlocked by flagging its descriptor as
accessible. The accessor then reads, writes and binds it through its raw
storage key instead of through normal attribute lookup. Nothing about the
member's declaration changes, so other code is unaffected.
"""

from __future__ import annotations

from lockpick.core import descriptors


def is_universally_accessible(member: descriptors.MemberDescriptor) -> bool:
  """Returns True if ordinary attribute access reaches ``member``.

  Args:
    member: A located field or method.

  Returns:
    True if the member and its declaring class are public and, for fields,
    the field can be reassigned.
  """
  if not member.modifiers.is_public:
    return False
  if not descriptors.TypeDescriptor(member.declaring_type).modifiers.is_public:
    return False
  if (
      isinstance(member, descriptors.FieldDescriptor)
      and member.modifiers.final
  ):
    return False
  return True


def check_accessible(member: descriptors.MemberDescriptor) -> None:
  """Rejects reflective access to a member that was never unlocked.

  Raises:
    AttributeError: If ``member`` is neither universally accessible nor
      unlocked, mirroring the error Python raises when a private name is
      accessed from outside its class.
  """
  if not member.accessible and not is_universally_accessible(member):
    raise AttributeError(
        f"{member.name} is not accessible from outside"
        f" {member.declaring_type.__qualname__}; unlock it with"
        " ensure_accessible first"
    )


def ensure_accessible(member: descriptors.MemberDescriptor) -> None:
  """Unlocks ``member`` for raw access, if it needs it.

  Only members that are not universally accessible and are not yet unlocked
  are touched, so calling this again on the same descriptor is a no-op.

  Args:
    member: A located field or method.
  """
  if not member.accessible and not is_universally_accessible(member):
    member.accessible = True
