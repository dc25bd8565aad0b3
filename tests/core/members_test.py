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

"""Tests for locating members across a type hierarchy."""

import typing

from absl.testing import absltest
from absl.testing import parameterized
from lockpick.core import descriptors
from lockpick.core import members
from tests.fixtures import reflection_examples_fixture as fixture_lib


class TypeChainTest(absltest.TestCase):

  def test_chain_excludes_root(self):
    chain = members.type_chain(fixture_lib.SavingsAccount)
    self.assertEqual(
        [level.type for level in chain],
        [fixture_lib.SavingsAccount, fixture_lib.Account, fixture_lib.Entity],
    )

  def test_chain_of_root_is_empty(self):
    self.assertEqual(members.type_chain(object), [])


class LocateFieldTest(parameterized.TestCase):

  @parameterized.named_parameters(
      ("own_annotation", "interest_rate", fixture_lib.SavingsAccount),
      ("parent_annotation", "owner", fixture_lib.Account),
      ("grandparent_public", "id", fixture_lib.Entity),
      ("grandparent_protected", "_created_by", fixture_lib.Entity),
      ("grandparent_private", "__secret", fixture_lib.Entity),
      ("unannotated_private", "__balance", fixture_lib.Account),
      ("undeclared_attribute", "nickname", fixture_lib.SavingsAccount),
  )
  def test_declaring_type(self, field_name, declaring_type):
    savings = fixture_lib.SavingsAccount(7, "ada", balance=100)
    field = members.locate_field(savings, field_name)
    self.assertIsNotNone(field)
    self.assertEqual(field.name, field_name)
    self.assertIs(field.declaring_type, declaring_type)
    self.assertFalse(field.accessible)

  @parameterized.parameters("missing", "_Account__balance", "__nickname")
  def test_absent_field_is_none(self, field_name):
    savings = fixture_lib.SavingsAccount(7, "ada")
    self.assertIsNone(members.locate_field(savings, field_name))

  def test_fields_of_object_are_not_searched(self):
    self.assertIsNone(members.locate_field(fixture_lib.Plain(), "__doc__"))

  def test_get_accessible_field_unlocks(self):
    savings = fixture_lib.SavingsAccount(7, "ada")
    secret = members.get_accessible_field(savings, "__secret")
    self.assertTrue(secret.accessible)
    owner = members.get_accessible_field(savings, "owner")
    self.assertFalse(owner.accessible)
    self.assertIsNone(members.get_accessible_field(savings, "missing"))


class LocateMethodTest(parameterized.TestCase):

  def test_by_signature(self):
    account = fixture_lib.Account(1, "ada")
    method = members.locate_method(account, "withdraw", (int,))
    self.assertIsNotNone(method)
    self.assertIs(method.declaring_type, fixture_lib.Account)

  def test_by_signature_mismatch(self):
    account = fixture_lib.Account(1, "ada")
    self.assertIsNone(members.locate_method(account, "withdraw", (str,)))
    self.assertIsNone(members.locate_method(account, "withdraw", ()))
    self.assertIsNone(members.locate_method(account, "withdraw", (int, int)))

  def test_signature_with_type_checking_only_return_annotation(self):
    wallet = fixture_lib.Wallet()
    method = members.locate_method(wallet, "withdraw", (int,))
    self.assertIsNotNone(method)
    self.assertIs(method.declaring_type, fixture_lib.Wallet)

  def test_unannotated_parameters_match_any(self):
    account = fixture_lib.Account(1, "ada")
    self.assertIsNotNone(
        members.locate_method(account, "deposit", (typing.Any,))
    )

  def test_most_derived_declaration_wins(self):
    savings = fixture_lib.SavingsAccount(1, "ada")
    method = members.locate_method(savings, "getOwner", ())
    self.assertIs(method.declaring_type, fixture_lib.SavingsAccount)
    by_name = members.locate_method_by_name(savings, "getOwner")
    self.assertIs(by_name.declaring_type, fixture_lib.SavingsAccount)

  def test_private_method_in_ancestor(self):
    savings = fixture_lib.SavingsAccount(1, "ada")
    method = members.locate_method_by_name(savings, "__describe")
    self.assertIs(method.declaring_type, fixture_lib.Entity)
    self.assertEqual(
        method.modifiers.visibility, descriptors.Visibility.PRIVATE
    )

  @parameterized.parameters("missing", "_Account__audit", "__repr__")
  def test_absent_method_is_none(self, method_name):
    account = fixture_lib.Account(1, "ada")
    self.assertIsNone(members.locate_method_by_name(account, method_name))
    self.assertIsNone(members.locate_method(account, method_name, ()))

  def test_get_accessible_method_unlocks(self):
    account = fixture_lib.Account(1, "ada")
    audit = members.get_accessible_method(account, "__audit", (str,))
    self.assertTrue(audit.accessible)
    withdraw = members.get_accessible_method_by_name(account, "withdraw")
    self.assertFalse(withdraw.accessible)
    self.assertIsNone(members.get_accessible_method(account, "missing"))
    self.assertIsNone(
        members.get_accessible_method_by_name(account, "missing")
    )


if __name__ == "__main__":
  absltest.main()
