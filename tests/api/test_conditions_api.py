from __future__ import annotations

import pytest
from fastapi import HTTPException

from api import main
from api.main import EntityPayload, EvaluateRequest, SaveConditionRequest
from domain.condition import ConditionRecord
from infrastructure.conditions.in_memory_condition_store import InMemoryConditionStore
from infrastructure.logging.console_logger import ConsoleLogger


@pytest.fixture
def store(monkeypatch) -> InMemoryConditionStore:
    store = InMemoryConditionStore(
        [
            ConditionRecord(
                id="front",
                plugin_id="token_matcher",
                label="Front page title",
                configuration={"token_match": "[node:title]", "value_match": "Hello"},
            )
        ]
    )
    monkeypatch.setattr(main, "STORE", store)
    monkeypatch.setattr(main, "_build_logger", lambda: ConsoleLogger())
    return store


def _node_request(title: str) -> EvaluateRequest:
    return EvaluateRequest(
        path="/node/1",
        entities={"node": EntityPayload(entity_type="node", id=1, values={"title": title})},
    )


def test_read_root_lists_plugins() -> None:
    assert main.read_root()["plugins"] == ["token_matcher"]


def test_evaluate_matching_title(store) -> None:
    response = main.evaluate_condition("front", _node_request("Hello"))

    assert response.result is True
    assert response.summary == "[node:title] = Hello"


def test_evaluate_other_title(store) -> None:
    assert main.evaluate_condition("front", _node_request("Goodbye")).result is False


def test_evaluate_without_entities(store) -> None:
    assert main.evaluate_condition("front", None).result is False


def test_evaluate_nested_entity_token(store) -> None:
    main.save_condition(
        "author",
        SaveConditionRequest(
            plugin_id="token_matcher",
            values={"token_match": "[node:author:name]", "value_match": "bob"},
        ),
    )
    request = EvaluateRequest(
        entities={
            "node": EntityPayload(
                entity_type="node",
                values={"author": {"entity_type": "user", "values": {"name": "bob"}}},
            )
        }
    )

    assert main.evaluate_condition("author", request).result is True


def test_evaluate_unknown_condition_is_404(store) -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.evaluate_condition("missing", None)

    assert exc_info.value.status_code == 404


def test_evaluate_invalid_pattern_is_422(store) -> None:
    store.save(
        ConditionRecord(
            id="regex",
            plugin_id="token_matcher",
            configuration={"token_match": "[node:title]", "value_match": "/[node:bundle](/", "use_regex": True},
        )
    )

    with pytest.raises(HTTPException) as exc_info:
        main.evaluate_condition("regex", _node_request("Hello"))

    assert exc_info.value.status_code == 422


def test_save_condition_validation_error_is_400(store) -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.save_condition("front", SaveConditionRequest(values={"value_match": "Hello"}))

    assert exc_info.value.status_code == 400
    assert "token_match" in exc_info.value.detail["errors"]


def test_save_condition_updates_store(store) -> None:
    response = main.save_condition(
        "front",
        SaveConditionRequest(values={"token_match": "[node:title]", "check_empty": True}),
    )

    assert response.configuration["check_empty"] is True
    assert store.get("front").configuration["check_empty"] is True


def test_get_condition_and_list(store) -> None:
    condition = main.get_condition("front")

    assert condition.label == "Front page title"
    assert condition.summary == "[node:title] = Hello"
    assert [c.id for c in main.list_conditions()] == ["front"]


def test_get_configuration_form(store) -> None:
    schema = main.get_configuration_form("token_matcher", condition_id="front")

    names = [e["name"] for e in schema["elements"]]
    assert names == ["token_match", "tokens", "check_empty", "value_match", "use_regex", "negate"]
    assert schema["elements"][0]["default_value"] == "[node:title]"


def test_get_configuration_form_unknown_plugin_is_404(store) -> None:
    with pytest.raises(HTTPException) as exc_info:
        main.get_configuration_form("missing", condition_id=None)

    assert exc_info.value.status_code == 404
