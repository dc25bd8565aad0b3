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

"""Tests for type and member descriptors."""

import typing

from absl.testing import absltest
from absl.testing import parameterized
from lockpick.core import descriptors
from tests.fixtures import reflection_examples_fixture as fixture_lib


class NamingTest(parameterized.TestCase):

  @parameterized.named_parameters(
      ("public", "balance", descriptors.Visibility.PUBLIC),
      ("protected", "_balance", descriptors.Visibility.PROTECTED),
      ("private", "__balance", descriptors.Visibility.PRIVATE),
      ("dunder", "__init__", descriptors.Visibility.PUBLIC),
  )
  def test_visibility_of(self, name, expected):
    self.assertEqual(descriptors.visibility_of(name), expected)

  def test_mangle_name(self):
    self.assertEqual(
        descriptors.mangle_name(fixture_lib.Account, "__balance"),
        "_Account__balance",
    )
    self.assertEqual(
        descriptors.mangle_name(fixture_lib._InternalService, "__token"),
        "_InternalService__token",
    )
    self.assertEqual(
        descriptors.mangle_name(fixture_lib.Account, "_balance"), "_balance"
    )
    self.assertEqual(
        descriptors.mangle_name(fixture_lib.Account, "__init__"), "__init__"
    )

  def test_demangle_name(self):
    self.assertEqual(
        descriptors.demangle_name(fixture_lib.Account, "_Account__balance"),
        "__balance",
    )
    # Keys mangled by another class are left alone.
    self.assertEqual(
        descriptors.demangle_name(fixture_lib.Account, "_Entity__secret"),
        "_Entity__secret",
    )


class TypeDescriptorTest(absltest.TestCase):

  def test_supertype(self):
    savings = descriptors.TypeDescriptor(fixture_lib.SavingsAccount)
    self.assertEqual(savings.name, "SavingsAccount")
    self.assertEqual(
        savings.supertype, descriptors.TypeDescriptor(fixture_lib.Account)
    )
    self.assertEqual(
        descriptors.TypeDescriptor(fixture_lib.Entity).supertype,
        descriptors.TypeDescriptor(object),
    )
    self.assertIsNone(descriptors.TypeDescriptor(object).supertype)

  def test_modifiers(self):
    self.assertTrue(
        descriptors.TypeDescriptor(fixture_lib.Account).modifiers.is_public
    )
    self.assertEqual(
        descriptors.TypeDescriptor(
            fixture_lib._InternalService
        ).modifiers.visibility,
        descriptors.Visibility.PROTECTED,
    )

  def test_type_arguments(self):
    self.assertEqual(
        descriptors.TypeDescriptor(fixture_lib.NamedPair).type_arguments,
        (str, float),
    )
    self.assertEqual(
        descriptors.TypeDescriptor(fixture_lib.Plain).type_arguments, ()
    )

  def test_declared_fields_are_only_own_fields(self):
    account = fixture_lib.Account(1, "ada", balance=10)
    entity_fields = descriptors.TypeDescriptor(
        fixture_lib.Entity
    ).declared_fields(account)
    self.assertEqual(list(entity_fields), ["id", "_created_by", "__secret"])
    self.assertEqual(entity_fields["__secret"].attribute_name, "_Entity__secret")
    self.assertIs(entity_fields["__secret"].declaring_type, fixture_lib.Entity)

    account_fields = descriptors.TypeDescriptor(
        fixture_lib.Account
    ).declared_fields(account)
    self.assertEqual(list(account_fields), ["owner", "__balance"])
    self.assertEqual(
        account_fields["__balance"].attribute_name, "_Account__balance"
    )
    self.assertEqual(
        account_fields["__balance"].modifiers.visibility,
        descriptors.Visibility.PRIVATE,
    )

  def test_unassigned_private_attributes_need_an_instance(self):
    account_fields = descriptors.TypeDescriptor(
        fixture_lib.Account
    ).declared_fields()
    self.assertEqual(list(account_fields), ["owner"])

  def test_slot_fields(self):
    fields = descriptors.TypeDescriptor(fixture_lib.Slotted).declared_fields()
    self.assertEqual(set(fields), {"value", "__hidden"})
    self.assertEqual(fields["__hidden"].attribute_name, "_Slotted__hidden")

  def test_final_and_static_fields(self):
    settings_fields = descriptors.TypeDescriptor(
        fixture_lib.Settings
    ).declared_fields()
    self.assertTrue(settings_fields["LIMIT"].modifiers.final)
    self.assertFalse(settings_fields["LIMIT"].modifiers.static)
    self.assertTrue(settings_fields["registry_size"].modifiers.static)
    self.assertFalse(settings_fields["registry_size"].modifiers.final)

    point_fields = descriptors.TypeDescriptor(
        fixture_lib.Point
    ).declared_fields()
    self.assertTrue(point_fields["x"].modifiers.final)
    self.assertTrue(point_fields["y"].modifiers.final)

  def test_declared_methods(self):
    methods = {
        method.name: method
        for method in descriptors.TypeDescriptor(
            fixture_lib.Account
        ).declared_methods()
    }
    self.assertIn("__audit", methods)
    self.assertNotIn("__describe", methods)
    self.assertEqual(
        methods["__audit"].modifiers.visibility,
        descriptors.Visibility.PRIVATE,
    )
    self.assertTrue(methods["currency"].modifiers.static)
    self.assertTrue(methods["open"].modifiers.static)
    self.assertFalse(methods["withdraw"].modifiers.static)

  def test_parameter_types(self):
    methods = {
        method.name: method
        for method in descriptors.TypeDescriptor(
            fixture_lib.Account
        ).declared_methods()
    }
    self.assertEqual(methods["withdraw"].parameter_types, (int,))
    self.assertEqual(methods["deposit"].parameter_types, (typing.Any,))
    self.assertEqual(methods["getOwner"].parameter_types, ())
    self.assertEqual(methods["currency"].parameter_types, ())
    self.assertEqual(methods["open"].parameter_types, (int, str))

  def test_parameter_types_ignore_unresolvable_return_annotation(self):
    (withdraw,) = descriptors.TypeDescriptor(
        fixture_lib.Wallet
    ).declared_methods()
    self.assertEqual(withdraw.parameter_types, (int,))

  def test_unresolvable_parameter_annotation_stays_a_string(self):

    class Ledger:

      def record(self, entry: "UndefinedEntry", amount: int):
        del entry, amount

    (record,) = descriptors.TypeDescriptor(Ledger).declared_methods()
    self.assertEqual(record.parameter_types, ("UndefinedEntry", int))


if __name__ == "__main__":
  absltest.main()
