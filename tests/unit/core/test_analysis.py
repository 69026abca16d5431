"""Unit tests for the analysis model, index and loader."""

import json

import pytest

from codeflow.core.analysis import (
    AnalysisResult,
    load_analysis_result,
    parse_analysis_result,
)
from codeflow.core.result import Err, Ok
from codeflow.core.types import CallKind, Category, NodeKey, Relationship


class TestAnalysisResult:
    def test_camel_case_wire_names(self, order_analysis):
        assert order_analysis.controllers[0].full_name == "Shop.Web.OrderController"
        assert order_analysis.entities[0].is_aggregate_root is True
        assert order_analysis.relationships[0].kind == CallKind.METHOD_TO_COMMAND

    def test_snake_case_accepted(self):
        analysis = AnalysisResult.model_validate({
            "commands": [{"name": "A", "full_name": "X.A"}],
        })
        assert analysis.commands[0].full_name == "X.A"

    def test_unknown_call_type_survives(self):
        rel = Relationship(source_type="A", target_type="B", call_type="SomethingNew")
        assert rel.call_type == "SomethingNew"
        assert rel.kind is None

    def test_frozen(self, order_analysis):
        with pytest.raises(Exception):
            order_analysis.controllers = []

    def test_empty(self, empty_analysis, order_analysis):
        assert empty_analysis.is_empty
        assert not order_analysis.is_empty

    def test_iter_elements_in_collection_order(self, order_analysis):
        categories = [c for c, _ in order_analysis.iter_elements()]
        assert categories == [
            Category.CONTROLLER,
            Category.COMMAND,
            Category.ENTITY,
            Category.DOMAIN_EVENT,
            Category.DOMAIN_EVENT_HANDLER,
        ]

    def test_merge_dedupes(self, order_analysis, full_analysis):
        merged = AnalysisResult.merge(order_analysis, full_analysis)

        assert len(merged.commands) == 2
        assert len(merged.entities) == 2
        assert len(merged.relationships) == len(full_analysis.relationships)

    def test_merge_first_wins(self):
        first = AnalysisResult.model_validate({"commands": [{"name": "First", "fullName": "X.A"}]})
        second = AnalysisResult.model_validate({"commands": [{"name": "Second", "fullName": "X.A"}]})

        merged = AnalysisResult.merge(first, second)
        assert [c.name for c in merged.commands] == ["First"]


class TestAnalysisIndex:
    def test_category_lookup(self, full_analysis):
        index = full_analysis.index
        assert index.category_of("Shop.Web.OrderController") == Category.CONTROLLER
        assert index.category_of("Shop.App.OrderCreatedIntegrationEventConverter") == \
            Category.INTEGRATION_EVENT_CONVERTER
        assert index.category_of("Nope") is None

    def test_first_category_wins(self):
        analysis = AnalysisResult.model_validate({
            "commands": [{"name": "Dup", "fullName": "X.Dup"}],
            "domainEvents": [{"name": "Dup", "fullName": "X.Dup"}],
        })
        assert analysis.index.category_of("X.Dup") == Category.COMMAND

    def test_index_is_cached(self, order_analysis):
        assert order_analysis.index is order_analysis.index

    def test_entity_lookup(self, order_analysis):
        index = order_analysis.index
        assert index.entity("Shop.Domain.Order").methods == ["Create"]
        assert index.entity("Shop.App.CreateOrderCommand") is None
        assert index.is_aggregate_root("Shop.Domain.Order")
        assert not index.is_aggregate_root("Shop.App.CreateOrderCommand")

    def test_handler_commands(self, full_analysis):
        index = full_analysis.index
        assert index.handler_commands("Shop.App.OrderCreatedIntegrationEventHandler") == [
            "Shop.App.ReserveStockCommand"
        ]
        assert index.handler_commands("Shop.App.OrderCreatedDomainEventHandler") == []
        assert index.handler_commands("Shop.Web.OrderController") is None

    def test_event_lookups(self, full_analysis):
        index = full_analysis.index
        event = "Shop.Domain.OrderCreatedDomainEvent"
        assert [h.name for h in index.domain_handlers_for(event)] == ["OrderCreatedDomainEventHandler"]
        assert [c.name for c in index.converters_for(event)] == ["OrderCreatedIntegrationEventConverter"]
        assert index.integration_handlers_for(event) == []

    def test_outgoing_by_kind(self, order_analysis):
        index = order_analysis.index
        assert len(index.outgoing("Shop.Domain.Order")) == 1
        assert index.outgoing("Shop.Domain.Order", CallKind.METHOD_TO_COMMAND) == []

    def test_unresolved_references(self):
        analysis = AnalysisResult.model_validate({
            "commands": [{"name": "A", "fullName": "X.A"}],
            "domainEventHandlers": [{
                "name": "H", "fullName": "X.H", "handledEventType": "X.Missing", "commands": ["X.A", "X.Gone"],
            }],
            "relationships": [
                {"sourceType": "X.A", "targetType": "X.Ghost", "callType": "CommandToAggregateMethod"},
            ],
        })
        missing = {(r.field, r.name) for r in analysis.index.unresolved_references()}
        assert missing == {
            ("target_type", "X.Ghost"),
            ("handled_event_type", "X.Missing"),
            ("commands", "X.Gone"),
        }


class TestNodeKey:
    def test_parse_method_key(self):
        assert NodeKey.parse("A.B::Run") == NodeKey("A.B", "Run")
        assert NodeKey.parse("A.B") == NodeKey("A.B")

    def test_str_round_trip(self):
        assert str(NodeKey("A.B", "Run")) == "A.B::Run"
        assert str(NodeKey("A.B")) == "A.B"

    def test_simple_name(self):
        assert NodeKey("Shop.Web.OrderController", "Post").simple_name == "OrderController.Post"
        assert NodeKey("Shop.Domain.Order").simple_name == "Order"


class TestLoading:
    def test_load_ok(self, analysis_file):
        result = load_analysis_result(analysis_file)
        assert isinstance(result, Ok)
        assert len(result.value.controllers) == 1

    def test_load_pascal_case(self, tmp_path):
        path = tmp_path / "analysis.json"
        path.write_text(json.dumps({
            "Controllers": [{"Name": "C", "FullName": "X.C", "Methods": ["Get"]}],
            "Relationships": [{
                "SourceType": "X.C", "SourceMethod": "Get", "TargetType": "X.Q",
                "TargetMethod": "", "CallType": "MethodToCommand",
            }],
        }))

        analysis = load_analysis_result(path).unwrap()
        assert analysis.controllers[0].methods == ["Get"]
        assert analysis.relationships[0].source_method == "Get"

    def test_missing_file(self, tmp_path):
        result = load_analysis_result(tmp_path / "missing.json")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        result = load_analysis_result(path)
        assert isinstance(result, Err)
        assert "Invalid JSON" in result.error.message
        assert result.error.path == str(path)

    def test_schema_violation(self):
        result = parse_analysis_result({"commands": [{"name": "NoFullName"}]})
        assert isinstance(result, Err)
        assert "Invalid analysis result" in result.error.message

    def test_non_object_document(self):
        result = parse_analysis_result([1, 2, 3])
        assert isinstance(result, Err)
