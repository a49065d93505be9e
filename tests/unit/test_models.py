"""Unit tests for Model, ModelRegistry and relations."""

from __future__ import annotations

import re
from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from model_query.exceptions import ColumnMismatchError, InvalidArgumentError, RelationError
from model_query.models.model import Model, ModelDescriptor
from model_query.models.registry import ModelRegistry, default_registry
from model_query.models.relations import BelongsTo, EqualFields, HasMany, Relation
from model_query.query.builder import Query
from model_query.query.model_query import ModelQuery


@dataclass
class Publisher(Model):
    id: int
    name: str


@dataclass
class Magazine(Model):
    __table__ = "magazines"
    __identifier__ = "code"
    __aliases__ = {"magazine_title": "title"}

    code: str
    title: str
    publisher_id: int | None = None


@dataclass
class Article(Model):
    __table__ = "articles"

    id: int
    magazine_code: str | None


Publisher.__relations__ = {"magazines": HasMany(Magazine, "publisher_id")}
Magazine.__relations__ = {
    "publisher": BelongsTo(Publisher, "publisher_id"),
    "articles": HasMany("Article", "magazine_code"),
}


class PydanticIssue(Model, BaseModel):
    __table__ = "issues"

    id: int
    number: int


class TestModel:
    def test_defaults(self) -> None:
        assert Publisher.get_table() == "publisher"
        assert Publisher.get_identifier_field() == "id"

    def test_overrides(self) -> None:
        assert Magazine.get_table() == "magazines"
        assert Magazine.get_identifier_field() == "code"

    def test_get_identifier(self) -> None:
        assert Magazine("m1", "Weekly").get_identifier() == "m1"

    def test_create_from_row_applies_aliases_and_drops_extra_columns(self) -> None:
        magazine = Magazine.create_from_row(
            {"code": "m1", "magazine_title": "Weekly", "publisher_id": 1, "printed": 500}
        )
        assert magazine == Magazine("m1", "Weekly", 1)

    def test_create_from_row_with_pydantic(self) -> None:
        issue = PydanticIssue.create_from_row({"id": "3", "number": 12})
        assert issue.id == 3

    def test_create_from_row_uses_get_mapper(self) -> None:
        class UpperMapper:
            def map_one(self, row: dict) -> str:
                return row["name"].upper()

        class Label(Model):
            @classmethod
            def get_mapper(cls) -> UpperMapper:
                return UpperMapper()

        assert Label.create_from_row({"name": "acme"}) == "ACME"

    def test_create_from_row_missing_column(self) -> None:
        with pytest.raises(ColumnMismatchError):
            Magazine.create_from_row({"code": "m1"})

    def test_get_relation(self) -> None:
        assert isinstance(Magazine.get_relation("publisher"), BelongsTo)
        assert Magazine.get_relation("nothing") is None

    def test_model_classes_are_descriptors(self) -> None:
        assert isinstance(Magazine, ModelDescriptor)

    def test_subclasses_are_registered(self) -> None:
        assert default_registry.get_model("Magazine") is Magazine
        assert default_registry.get_model_by_table("magazines") is Magazine


class TestModelRegistry:
    def test_register_and_lookup(self) -> None:
        registry = ModelRegistry()
        registry.register(Publisher)
        assert "Publisher" in registry
        assert registry.get_model("Publisher") is Publisher
        assert registry.get_model("Nope") is None
        assert len(registry) == 1

    def test_plain_classes_are_registered_by_name_only(self) -> None:
        class Plain:
            pass

        registry = ModelRegistry()
        registry.register(Plain)
        assert registry.get_model("Plain") is Plain
        assert registry.get_model_by_table("plain") is None


def magazine_query() -> ModelQuery:
    return ModelQuery(Query(table="magazines"), Magazine)


class TestRelations:
    def test_relations_satisfy_protocol(self) -> None:
        assert isinstance(BelongsTo(Publisher, "publisher_id"), Relation)

    def test_belongs_to_defaults_to_identifier(self) -> None:
        relation = BelongsTo(Magazine, "magazine_code")
        assert relation.get_related_model() is Magazine
        assert relation.self_field == "magazine_code"
        assert relation.foreign_field == "code"

    def test_has_many_fields(self) -> None:
        relation = HasMany(Magazine, "publisher_id", "id")
        assert relation.self_field == "id"
        assert relation.foreign_field == "publisher_id"

    def test_has_many_defaults_to_owner_identifier(self) -> None:
        sql, params = magazine_query().where_relation("articles", Article(1, "m1")).compile()
        assert sql == 'SELECT * FROM "magazines" WHERE (("magazines"."code" = :p1))'
        assert params == {"p1": "m1"}

    def test_has_many_sub_query_joins_on_owner_identifier(self) -> None:
        sql, _ = magazine_query().where_relation("articles").compile()
        assert re.fullmatch(
            r'SELECT \* FROM "magazines" WHERE \(\(EXISTS \(SELECT \* FROM "articles" '
            r'AS "(articles_\d+)" WHERE "\1"\."magazine_code" = "magazines"\."code"\)\)\)',
            sql,
        )

    def test_model_name_is_resolved_through_registry(self) -> None:
        registry = ModelRegistry()
        registry.register(Publisher)
        relation = EqualFields("Publisher", "publisher_id", "id", registry)
        assert relation.get_related_model() is Publisher

    def test_unregistered_model_name(self) -> None:
        relation = EqualFields("Ghost", "ghost_id", "id", ModelRegistry())
        with pytest.raises(RelationError, match="Ghost"):
            relation.get_related_model()

    def test_instance_target(self) -> None:
        query = magazine_query().where_relation("publisher", Publisher(7, "Acme"))
        sql, params = query.compile()
        assert sql == 'SELECT * FROM "magazines" WHERE (("magazines"."publisher_id" = :p1))'
        assert params == {"p1": 7}

    def test_any_target_uses_exists(self) -> None:
        sql, params = magazine_query().where_relation("publisher").compile()
        assert re.fullmatch(
            r'SELECT \* FROM "magazines" WHERE \(\(EXISTS \(SELECT \* FROM "publisher" '
            r'AS "(publisher_\d+)" WHERE "\1"\."id" = "magazines"\."publisher_id"\)\)\)',
            sql,
        )
        assert params == {}

    def test_callable_target_filters_related_model(self) -> None:
        seen: list[ModelQuery] = []

        def acme(query: ModelQuery) -> None:
            seen.append(query)
            query.where("name", "Acme")

        sql, params = magazine_query().where_relation("publisher", acme).compile()

        assert seen[0].model is Publisher
        assert re.fullmatch(
            r'SELECT \* FROM "magazines" WHERE \(\(EXISTS \(SELECT \* FROM "publisher" '
            r'AS "(publisher_\d+)" WHERE "\1"\."id" = "magazines"\."publisher_id" '
            r'AND \("\1"\."name" = :p1\)\)\)\)',
            sql,
        )
        assert params == {"p1": "Acme"}

    def test_target_of_wrong_model(self) -> None:
        with pytest.raises(InvalidArgumentError, match="Publisher"):
            magazine_query().where_relation("publisher", Magazine("m2", "Monthly"))

    def test_target_of_wrong_type(self) -> None:
        with pytest.raises(InvalidArgumentError):
            magazine_query().where_relation("publisher", 7)

    def test_model_class_is_not_a_callable_target(self) -> None:
        with pytest.raises(InvalidArgumentError):
            magazine_query().where_relation("publisher", Publisher)

    def test_target_without_key_value(self) -> None:
        relation = HasMany(Magazine, "publisher_id")
        query = ModelQuery(Query(table="publisher"), Publisher)
        with pytest.raises(InvalidArgumentError, match="publisher_id"):
            relation.apply_to_query_where(query, [Magazine("m1", "Weekly", None)])

    def test_several_targets_are_alternatives(self) -> None:
        relation = BelongsTo(Publisher, "publisher_id")
        query = magazine_query()
        relation.apply_to_query_where(query, [Publisher(1, "A"), Publisher(2, "B")])
        sql, params = query.compile()
        assert sql == (
            'SELECT * FROM "magazines" WHERE '
            '("magazines"."publisher_id" = :p1 OR "magazines"."publisher_id" = :p2)'
        )
        assert params == {"p1": 1, "p2": 2}

    def test_sub_query_aliases_are_unique(self) -> None:
        first, _ = magazine_query().where_relation("publisher").compile()
        second, _ = magazine_query().where_relation("publisher").compile()
        assert first != second

    def test_repr(self) -> None:
        assert repr(EqualFields("Publisher", "a", "b")) == "EqualFields('Publisher', 'a', 'b')"
