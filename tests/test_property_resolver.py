import unittest
from datetime import date
from decimal import Decimal
from typing import Annotated, Optional

from gridquery.services.property_resolver import FieldKind, classify, resolve, unwrap_type
from tests.records import Ambiguous, Owner, Person, Pet, Priority, Product, Species, Team


class PropertyResolverTests(unittest.TestCase):
    def test_segment_is_matched_case_insensitively(self):
        accessor = resolve(Person, "name")
        self.assertIsNotNone(accessor)
        self.assertEqual(accessor.path, ("Name",))
        self.assertEqual(accessor.kind, FieldKind.TEXT)
        self.assertTrue(accessor.nullable)

    def test_nested_path_resolves_through_declared_type(self):
        accessor = resolve(Person, "Team.Name")
        self.assertEqual(accessor.path, ("team", "Name"))
        self.assertIs(accessor.field_type, str)
        self.assertFalse(accessor.nullable)

        deep = resolve(Person, "boss.team.budget")
        self.assertEqual(deep.path, ("boss", "team", "Budget"))
        self.assertEqual(deep.kind, FieldKind.NUMERIC)

    def test_blank_or_missing_paths_are_unresolved(self):
        self.assertIsNone(resolve(Person, ""))
        self.assertIsNone(resolve(Person, "   "))
        self.assertIsNone(resolve(Person, None))
        self.assertIsNone(resolve(Person, "Salary"))
        self.assertIsNone(resolve(Person, "Team.Missing"))
        self.assertIsNone(resolve(Person, "Team..Name"))

    def test_cannot_descend_into_scalar_field(self):
        self.assertIsNone(resolve(Person, "Age.Real"))

    def test_private_members_are_hidden(self):
        self.assertIsNone(resolve(Person, "_secret"))

    def test_names_differing_only_by_case_are_ambiguous(self):
        self.assertIsNone(resolve(Ambiguous, "code"))
        self.assertIsNone(resolve(Ambiguous, "CODE"))

    def test_read_only_property_with_annotation_resolves(self):
        accessor = resolve(Person, "displayname")
        self.assertEqual(accessor.kind, FieldKind.TEXT)
        self.assertEqual(accessor.get(Person(Name="Eve", Age=3)), "Eve (3)")

    def test_field_kinds(self):
        self.assertEqual(resolve(Person, "Age").kind, FieldKind.NUMERIC)
        self.assertEqual(resolve(Person, "Score").kind, FieldKind.NUMERIC)
        self.assertEqual(resolve(Person, "Level").kind, FieldKind.ENUM)
        self.assertEqual(resolve(Person, "Rank").kind, FieldKind.ENUM)
        self.assertEqual(resolve(Person, "Active").kind, FieldKind.OTHER)
        self.assertEqual(resolve(Person, "Joined").kind, FieldKind.OTHER)
        self.assertEqual(resolve(Person, "Team").kind, FieldKind.OTHER)
        self.assertTrue(resolve(Person, "Level").nullable)
        self.assertFalse(resolve(Person, "Rank").nullable)

    def test_pydantic_model_fields_resolve_without_base_model_members(self):
        self.assertEqual(resolve(Product, "SKU").kind, FieldKind.TEXT)
        self.assertEqual(resolve(Product, "Price").field_type, Decimal)
        self.assertEqual(resolve(Product, "tags").kind, FieldKind.OTHER)
        self.assertIsNone(resolve(Product, "model_fields_set"))

    def test_sqlalchemy_columns_and_scalar_relationships(self):
        nickname = resolve(Pet, "NickName")
        self.assertEqual(nickname.kind, FieldKind.TEXT)
        self.assertTrue(nickname.nullable)

        species = resolve(Pet, "species")
        self.assertIs(species.field_type, Species)
        self.assertEqual(species.kind, FieldKind.ENUM)

        self.assertEqual(resolve(Pet, "weight").field_type, Decimal)
        self.assertFalse(resolve(Pet, "age").nullable)

        owner_name = resolve(Pet, "Owner.Name")
        self.assertEqual(owner_name.path, ("owner", "name"))
        self.assertEqual(owner_name.kind, FieldKind.TEXT)

    def test_collection_relationships_do_not_resolve(self):
        self.assertIsNone(resolve(Owner, "pets"))
        self.assertIsNone(resolve(Owner, "pets.nickname"))

    def test_get_returns_none_when_a_link_is_missing(self):
        accessor = resolve(Person, "Team.Name")
        self.assertIsNone(accessor.get(Person(Name="Solo", Age=1, team=None)))
        self.assertEqual(accessor.get(Person(Name="Member", Age=1, team=Team("Red", Decimal(1)))), "Red")


class TypeClassificationTests(unittest.TestCase):
    def test_unwrap_optional_and_annotated(self):
        self.assertEqual(unwrap_type(Optional[int]), (int, True))
        self.assertEqual(unwrap_type(int | None), (int, True))
        self.assertEqual(unwrap_type(Annotated[str, "meta"]), (str, False))
        self.assertEqual(unwrap_type(int | str), (object, False))

    def test_enum_is_checked_before_text_and_numbers(self):
        self.assertEqual(classify(Priority), FieldKind.ENUM)
        self.assertEqual(classify(bool), FieldKind.OTHER)
        self.assertEqual(classify(date), FieldKind.OTHER)
        self.assertEqual(classify(Decimal), FieldKind.NUMERIC)
        self.assertEqual(classify(list[int]), FieldKind.OTHER)
