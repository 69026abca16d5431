"""Shared fixtures: small but complete analysis results."""

import json

import pytest

from codeflow.core.analysis import AnalysisResult

CONTROLLER = "Shop.Web.OrderController"
CREATE_ORDER = "Shop.App.CreateOrderCommand"
ORDER = "Shop.Domain.Order"
ORDER_CREATED = "Shop.Domain.OrderCreatedDomainEvent"
ORDER_CREATED_HANDLER = "Shop.App.OrderCreatedDomainEventHandler"
ORDER_CONVERTER = "Shop.App.OrderCreatedIntegrationEventConverter"
ORDER_CREATED_IE = "Shop.Contracts.OrderCreatedIntegrationEvent"
ORDER_CREATED_IE_HANDLER = "Shop.App.OrderCreatedIntegrationEventHandler"
RESERVE_STOCK = "Shop.App.ReserveStockCommand"
STOCK = "Shop.Domain.Stock"


def rel(source, source_method, target, target_method, call_type):
    return {
        "sourceType": source,
        "sourceMethod": source_method,
        "targetType": target,
        "targetMethod": target_method,
        "callType": call_type,
    }


def element(full_name, **extra):
    return {"name": full_name.split(".")[-1], "fullName": full_name, **extra}


def order_scenario_data():
    """OrderController.Post -> CreateOrderCommand -> Order.Create -> event -> handler."""
    return {
        "controllers": [element(CONTROLLER, methods=["Post", "Get"])],
        "commands": [element(CREATE_ORDER)],
        "entities": [element(ORDER, isAggregateRoot=True, methods=["Create"])],
        "domainEvents": [element(ORDER_CREATED)],
        "domainEventHandlers": [
            element(ORDER_CREATED_HANDLER, handledEventType=ORDER_CREATED, commands=[]),
        ],
        "relationships": [
            rel(CONTROLLER, "Post", CREATE_ORDER, "", "MethodToCommand"),
            rel(CREATE_ORDER, "", ORDER, "Create", "CommandToAggregateMethod"),
            rel(ORDER, "Create", ORDER_CREATED, "", "MethodToDomainEvent"),
            rel(ORDER_CREATED, "", ORDER_CREATED_HANDLER, "", "DomainEventToHandler"),
        ],
    }


def full_scenario_data():
    """The order scenario extended with a converter and an integration handler."""
    data = order_scenario_data()
    data["commands"].append(element(RESERVE_STOCK))
    data["entities"].append(element(STOCK, isAggregateRoot=True, methods=["Reserve"]))
    data["integrationEvents"] = [element(ORDER_CREATED_IE)]
    data["integrationEventConverters"] = [
        element(ORDER_CONVERTER, domainEventType=ORDER_CREATED, integrationEventType=ORDER_CREATED_IE),
    ]
    data["integrationEventHandlers"] = [
        element(ORDER_CREATED_IE_HANDLER, handledEventType=ORDER_CREATED_IE, commands=[RESERVE_STOCK]),
    ]
    data["relationships"] += [
        rel(ORDER_CREATED, "", ORDER_CREATED_IE, "", "DomainEventToIntegrationEvent"),
        rel(ORDER_CREATED_IE, "", ORDER_CREATED_IE_HANDLER, "", "IntegrationEventToHandler"),
        rel(RESERVE_STOCK, "", STOCK, "Reserve", "CommandToAggregateMethod"),
    ]
    return data


@pytest.fixture
def order_analysis():
    return AnalysisResult.model_validate(order_scenario_data())


@pytest.fixture
def full_analysis():
    return AnalysisResult.model_validate(full_scenario_data())


@pytest.fixture
def cycle_analysis():
    """A handler that re-sends the command which triggered it."""
    ship = "Shop.App.ShipOrderCommand"
    shipped = "Shop.Domain.OrderShippedDomainEvent"
    handler = "Shop.App.OrderShippedDomainEventHandler"
    return AnalysisResult.model_validate({
        "controllers": [element(CONTROLLER, methods=["Ship"])],
        "commands": [element(ship)],
        "entities": [element(ORDER, isAggregateRoot=True, methods=["Ship"])],
        "domainEvents": [element(shipped)],
        "domainEventHandlers": [element(handler, handledEventType=shipped, commands=[ship])],
        "relationships": [
            rel(CONTROLLER, "Ship", ship, "", "MethodToCommand"),
            rel(ship, "", ORDER, "Ship", "CommandToAggregateMethod"),
            rel(ORDER, "Ship", shipped, "", "MethodToDomainEvent"),
            rel(shipped, "", handler, "", "DomainEventToHandler"),
        ],
    })


@pytest.fixture
def empty_analysis():
    return AnalysisResult()


@pytest.fixture
def analysis_file(tmp_path):
    """The full scenario written to disk, as the CLI consumes it."""
    path = tmp_path / "analysis.json"
    path.write_text(json.dumps(full_scenario_data()), encoding="utf-8")
    return path
