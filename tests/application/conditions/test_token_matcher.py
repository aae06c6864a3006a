from __future__ import annotations

from typing import Any, Dict, Optional

import pytest

from application.conditions.token_matcher import TokenMatcherCondition
from application.services.token_replacer import TokenReplacer
from domain.entity import Entity, EntityKind, EntityTypeDefinition
from domain.exceptions import InvalidPatternError, ValidationError
from domain.request import ParameterBag, Request
from infrastructure.entity.in_memory_entity_type_registry import InMemoryEntityTypeRegistry
from infrastructure.modules.static_module_handler import StaticModuleHandler
from infrastructure.request.request_stack import RequestStack


class FakeLogger:
    def __init__(self) -> None:
        self.events: list[dict[str, object]] = []

    def bind(self, **fields: object) -> "FakeLogger":
        return self

    def debug(self, event: str, **fields: object) -> None:
        self.events.append({"type": event, "level": "debug", **fields})

    def info(self, event: str, **fields: object) -> None:
        self.events.append({"type": event, "level": "info", **fields})

    def warning(self, event: str, **fields: object) -> None:
        self.events.append({"type": event, "level": "warning", **fields})

    def error(self, event: str, **fields: object) -> None:
        self.events.append({"type": event, "level": "error", **fields})


def _node(title: Any) -> Entity:
    return Entity(entity_type_id="node", id=1, bundle="article", label=str(title), values={"title": title})


def _condition(
    configuration: Dict[str, Any],
    attributes: Optional[Dict[str, Any]] = None,
    modules=("token",),
    logger: Optional[FakeLogger] = None,
    push_request: bool = True,
) -> TokenMatcherCondition:
    stack = RequestStack()
    if push_request:
        stack.push(Request(path="/node/1", attributes=ParameterBag(attributes or {})))
    return TokenMatcherCondition(
        configuration,
        token_service=TokenReplacer(),
        entity_type_registry=InMemoryEntityTypeRegistry.default(),
        request_stack=stack,
        module_handler=StaticModuleHandler(enabled=frozenset(modules)),
        logger=logger,
    )


class TestEvaluateEquality:
    def test_matching_title_is_true(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "Hello"},
            {"node": _node("Hello")},
        )
        assert condition.evaluate() is True

    def test_different_title_is_false(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "Hello"},
            {"node": _node("Goodbye")},
        )
        assert condition.evaluate() is False

    def test_equality_is_case_sensitive(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "hello"},
            {"node": _node("Hello")},
        )
        assert condition.evaluate() is False

    def test_equality_is_not_numeric(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "1"},
            {"node": _node("1.0")},
        )
        assert condition.evaluate() is False

    @pytest.mark.parametrize("title", ["Hello", "Goodbye", ""])
    def test_swapping_templates_preserves_result(self, title):
        attributes = {"node": _node(title)}
        forward = _condition({"token_match": "[node:title]", "value_match": "Hello"}, attributes)
        backward = _condition({"token_match": "Hello", "value_match": "[node:title]"}, attributes)
        assert forward.evaluate() == backward.evaluate()

    def test_both_templates_may_contain_tokens(self):
        author = Entity(entity_type_id="user", id=3, label="bob", values={"name": "bob"})
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "by [user:name]"},
            {"node": _node("by bob"), "user": author},
        )
        assert condition.evaluate() is True

    def test_repeated_evaluation_is_stable(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "Hello"},
            {"node": _node("Hello")},
        )
        assert [condition.evaluate() for _ in range(3)] == [True, True, True]


class TestEvaluateCheckEmpty:
    def test_empty_title_is_true(self):
        condition = _condition(
            {"token_match": "[node:title]", "check_empty": True},
            {"node": _node("")},
        )
        assert condition.evaluate() is True

    def test_zero_string_counts_as_empty(self):
        condition = _condition(
            {"token_match": "[node:title]", "check_empty": True},
            {"node": _node("0")},
        )
        assert condition.evaluate() is True

    def test_non_empty_title_is_false(self):
        condition = _condition(
            {"token_match": "[node:title]", "check_empty": True},
            {"node": _node("x")},
        )
        assert condition.evaluate() is False

    def test_method_name_in_chain_clears_to_empty(self):
        condition = _condition(
            {"token_match": "[node:title:upper]", "check_empty": True},
            {"node": _node("Hello")},
        )
        assert condition.evaluate() is True

    @pytest.mark.parametrize("value_match", ["", "x", "/(/"])
    @pytest.mark.parametrize("use_regex", [True, False])
    def test_value_match_and_regex_are_ignored(self, value_match, use_regex):
        condition = _condition(
            {
                "token_match": "[node:title]",
                "value_match": value_match,
                "use_regex": use_regex,
                "check_empty": True,
            },
            {"node": _node("")},
        )
        assert condition.evaluate() is True


class TestEvaluateRegex:
    def test_anchored_pattern_matches_prefix(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "^Hel", "use_regex": True},
            {"node": _node("Hello")},
        )
        assert condition.evaluate() is True

    def test_anchored_pattern_rejects_inner_match(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "^Hel", "use_regex": True},
            {"node": _node("xHello")},
        )
        assert condition.evaluate() is False

    def test_unanchored_pattern_matches_anywhere(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "ell", "use_regex": True},
            {"node": _node("xHello")},
        )
        assert condition.evaluate() is True

    def test_delimited_pattern_with_modifier(self):
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "/^hello$/i", "use_regex": True},
            {"node": _node("HELLO")},
        )
        assert condition.evaluate() is True

    def test_pattern_may_contain_tokens(self):
        condition = _condition(
            {"token_match": "Re: [node:title]", "value_match": "/[node:bundle]$/", "use_regex": True},
            {"node": Entity(entity_type_id="node", bundle="article", values={"title": "an article"})},
        )
        assert condition.evaluate() is True

    def test_invalid_pattern_raises_and_logs(self):
        logger = FakeLogger()
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "/(unclosed/", "use_regex": True},
            {"node": _node("Hello")},
            logger=logger,
        )
        with pytest.raises(InvalidPatternError):
            condition.evaluate()
        assert [e["type"] for e in logger.events if e["level"] == "warning"] == ["condition.invalid_pattern"]

    def test_token_only_pattern_without_entity_raises(self):
        # the pattern resolves to "" and an empty pattern is malformed
        logger = FakeLogger()
        condition = _condition(
            {"token_match": "article", "value_match": "[node:bundle]", "use_regex": True},
            {},
            logger=logger,
        )
        with pytest.raises(InvalidPatternError) as exc_info:
            condition.evaluate()
        assert exc_info.value.pattern == ""
        assert any(e["type"] == "condition.invalid_pattern" for e in logger.events)

    def test_token_only_pattern_with_entity_matches(self):
        condition = _condition(
            {"token_match": "article", "value_match": "[node:bundle]", "use_regex": True},
            {"node": Entity(entity_type_id="node", bundle="article")},
        )
        assert condition.evaluate() is True


class TestTokenData:
    def test_missing_entity_resolves_to_empty(self):
        condition = _condition({"token_match": "[node:title]", "value_match": ""}, {})
        assert condition.evaluate() is True

    def test_missing_entity_clears_only_the_token(self):
        condition = _condition({"token_match": "a [node:title] b", "value_match": "a  b"}, {})
        assert condition.evaluate() is True

    def test_missing_entity_never_leaves_placeholder(self):
        condition = _condition({"token_match": "[node:title]", "value_match": "[node:title]"}, {})
        assert condition.evaluate() is True
        condition = _condition(
            {"token_match": "[node:title]", "value_match": "node", "use_regex": True}, {}
        )
        assert condition.evaluate() is False

    def test_non_entity_attribute_is_ignored(self):
        condition = _condition({"token_match": "[node:title]", "check_empty": True}, {"node": "1"})
        assert condition.get_pseudo_context_value("node") is None
        assert condition.evaluate() is True

    def test_config_entity_attribute_is_ignored(self):
        block = Entity(entity_type_id="node", label="cfg", values={"title": "x"}, kind=EntityKind.CONFIG)
        condition = _condition({"token_match": "[node:title]", "check_empty": True}, {"node": block})
        assert condition.get_pseudo_context_value("node") is None
        assert condition.evaluate() is True

    def test_no_current_request(self):
        condition = _condition({"token_match": "[node:title]", "check_empty": True}, push_request=False)
        assert condition.get_pseudo_context_value("node") is None
        assert condition.get_token_data() == {}
        assert condition.evaluate() is True

    def test_token_type_override(self):
        term = Entity(entity_type_id="taxonomy_term", id=4, label="News", values={"name": "News"})
        condition = _condition(
            {"token_match": "[term:name]", "value_match": "News"},
            {"taxonomy_term": term},
        )
        assert condition.get_token_data() == {"term": term}
        assert condition.evaluate() is True

    def test_content_token_types_exclude_config_types(self):
        condition = _condition({})
        assert condition.get_content_token_types() == {
            "node": "node",
            "user": "user",
            "comment": "comment",
            "taxonomy_term": "term",
        }

    def test_content_token_types_from_custom_registry(self):
        condition = TokenMatcherCondition(
            {},
            token_service=TokenReplacer(),
            entity_type_registry=InMemoryEntityTypeRegistry(
                [
                    EntityTypeDefinition(id="media", token_type="media_item"),
                    EntityTypeDefinition(id="view", kind=EntityKind.CONFIG),
                ]
            ),
            request_stack=RequestStack(),
            module_handler=StaticModuleHandler(),
        )
        assert condition.get_content_token_types() == {"media": "media_item"}


class TestNegateAndSummary:
    def test_execute_applies_negate(self):
        attributes = {"node": _node("Hello")}
        plain = _condition({"token_match": "[node:title]", "value_match": "Hello"}, attributes)
        negated = _condition({"token_match": "[node:title]", "value_match": "Hello", "negate": 1}, attributes)
        assert plain.execute() is True
        assert negated.execute() is False
        assert negated.evaluate() is True

    def test_summary(self):
        condition = _condition({"token_match": "[node:title]", "value_match": "Hello"})
        assert condition.summary() == "[node:title] = Hello"

    def test_summary_of_defaults(self):
        assert _condition({}).summary() == " = "


class TestConfigurationForm:
    def test_default_configuration(self):
        assert _condition({}).get_configuration() == {
            "token_match": "",
            "value_match": "",
            "check_empty": False,
            "use_regex": False,
            "negate": False,
        }

    def test_form_element_order_and_defaults(self):
        condition = _condition({"token_match": "[node:title]", "value_match": "Hello", "use_regex": True})
        schema = condition.build_configuration_form()

        assert schema.plugin_id == "token_matcher"
        assert schema.names() == ["token_match", "tokens", "check_empty", "value_match", "use_regex", "negate"]
        assert schema.element("token_match").default_value == "[node:title]"
        assert schema.element("value_match").default_value == "Hello"
        assert schema.element("use_regex").default_value is True
        assert schema.element("check_empty").default_value is False

    def test_token_match_required_rule(self):
        rule = _condition({}).build_configuration_form().element("token_match").state("required")

        assert rule.applies({"value_match": "x"}) is True
        assert rule.applies({"check_empty": True}) is True
        assert rule.applies({"value_match": "", "check_empty": False}) is False

    def test_value_match_and_regex_hidden_when_checking_empty(self):
        schema = _condition({}).build_configuration_form()
        for name in ("value_match", "use_regex"):
            rule = schema.element(name).state("invisible")
            assert rule.applies({"check_empty": True}) is True
            assert rule.applies({"check_empty": False}) is False

    def test_token_browser_when_token_module_exists(self):
        tokens = _condition({}).build_configuration_form().element("tokens")

        assert tokens.type == "token_tree_link"
        assert tokens.properties["token_types"] == ["comment", "node", "term", "user"]
        assert tokens.properties["global_types"] is True
        assert tokens.properties["dialog"] is True

    def test_note_when_token_module_missing(self):
        tokens = _condition({}, modules=()).build_configuration_form().element("tokens")

        assert tokens.type == "markup"
        assert tokens.weight == 99
        assert "Token module" in tokens.properties["markup"]


class TestValidateAndSubmit:
    def test_validate_accepts_empty_form(self):
        _condition({}).validate_configuration_form({})

    def test_validate_requires_source_when_expected_given(self):
        with pytest.raises(ValidationError) as exc_info:
            _condition({}).validate_configuration_form({"token_match": "", "value_match": "Hello"})
        assert set(exc_info.value.errors) == {"token_match"}

    def test_validate_requires_source_when_checking_empty(self):
        with pytest.raises(ValidationError) as exc_info:
            _condition({}).validate_configuration_form({"check_empty": "1"})
        assert "token_match" in exc_info.value.errors

    @pytest.mark.parametrize("flag", ["false", "no", "off", "0", ""])
    def test_validate_reads_unchecked_flag_strings_like_submit(self, flag):
        values = {"token_match": "", "value_match": "", "check_empty": flag}
        condition = _condition({})

        condition.validate_configuration_form(values)
        condition.submit_configuration_form(values)

        assert condition.get_configuration()["check_empty"] is False

    def test_validate_rejects_invalid_static_pattern(self):
        with pytest.raises(ValidationError) as exc_info:
            _condition({}).validate_configuration_form(
                {"token_match": "[node:title]", "value_match": "/(/", "use_regex": True}
            )
        assert "value_match" in exc_info.value.errors

    def test_validate_skips_pattern_with_tokens(self):
        _condition({}).validate_configuration_form(
            {"token_match": "[node:title]", "value_match": "/[node:bundle](/", "use_regex": True}
        )

    def test_validate_skips_pattern_when_checking_empty(self):
        _condition({}).validate_configuration_form(
            {"token_match": "[node:title]", "value_match": "/(/", "use_regex": True, "check_empty": True}
        )

    def test_submit_stores_coerced_values(self):
        condition = _condition({})
        condition.submit_configuration_form(
            {
                "token_match": "[node:title]",
                "value_match": "Hello",
                "check_empty": "0",
                "use_regex": "1",
                "negate": "1",
            }
        )
        assert condition.get_configuration() == {
            "token_match": "[node:title]",
            "value_match": "Hello",
            "check_empty": False,
            "use_regex": True,
            "negate": True,
        }
