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

"""Module of aliases for common lockpick classes and functions."""

# pylint: disable=g-multiple-import,g-importing-member,unused-import

from lockpick.core.access import (
    check_accessible,
    ensure_accessible,
    is_universally_accessible,
)
from lockpick.core.descriptors import (
    FieldDescriptor,
    MemberDescriptor,
    MethodDescriptor,
    Modifiers,
    TypeDescriptor,
    Visibility,
)
from lockpick.core.errors import (
    InvalidInvocationError,
    MemberResolutionError,
    ProxyUnwrapWarning,
    ReflectionError,
    TypeArgumentWarning,
    UnexpectedReflectiveError,
    convert_reflection_error,
)
from lockpick.core.generics import (
    get_class_generic_type,
    get_class_generic_types,
)
from lockpick.core.invocation import (
    invoke,
    invoke_method,
    invoke_method_by_name,
    read_field,
    write_field,
)
from lockpick.core.members import (
    get_accessible_field,
    get_accessible_method,
    get_accessible_method_by_name,
    locate_field,
    locate_method,
    locate_method_by_name,
    type_chain,
)
from lockpick.core.properties import (
    AccessorNaming,
    CAMEL_CASE_ACCESSORS,
    SNAKE_CASE_ACCESSORS,
    accessor_naming,
    get_field_value,
    invoke_getter,
    invoke_setter,
    set_field_value,
)
from lockpick.core.proxies import (
    get_user_class,
    is_proxy_type,
    name_marker_predicate,
    proxy_type_predicates,
)
