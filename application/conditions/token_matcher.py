# application/conditions/token_matcher.py
from __future__ import annotations

from typing import Any, Dict, List, Optional

from application.conditions.base import ConditionPlugin
from application.ports.entity_type_registry import EntityTypeRegistryPort
from application.ports.logger import LoggerPort, NullLogger
from application.ports.module_handler import ModuleHandlerPort
from application.ports.request_stack import RequestStackPort
from application.ports.token_service import TokenServicePort
from application.services.token_replacer import TOKEN_PATTERN
from domain.condition import TokenMatcherConfig
from domain.emptiness import is_empty
from domain.entity import Entity, EntityTypeDefinition
from domain.exceptions import InvalidPatternError, ValidationError
from domain.form import FieldCondition, FormElement, StateRule
from domain.form_validator import FormValidator
from domain.pattern import compile_pattern

TOKEN_MODULE = "token"
TOKEN_MODULE_URL = "https://www.drupal.org/project/token"


class TokenMatcherCondition(ConditionPlugin):
    """
    Compares a token string, resolved against the entities of the current
    request, with an expected value.

    Evaluation order:
      1. check_empty => resolved source is empty ("", "0", ...)
      2. use_regex   => expected value is a pattern searched in the source
      3. otherwise   => exact string equality
    """

    plugin_id = "token_matcher"
    label = "Token Matcher"

    def __init__(
        self,
        configuration: Dict[str, Any],
        token_service: TokenServicePort,
        entity_type_registry: EntityTypeRegistryPort,
        request_stack: RequestStackPort,
        module_handler: ModuleHandlerPort,
        logger: Optional[LoggerPort] = None,
    ):
        super().__init__(configuration)
        self._token = token_service
        self._entity_types = entity_type_registry
        self._request_stack = request_stack
        self._module_handler = module_handler
        self._logger = logger or NullLogger()

    @property
    def config(self) -> TokenMatcherConfig:
        return TokenMatcherConfig.from_dict(self.configuration)

    def default_configuration(self) -> Dict[str, Any]:
        defaults = TokenMatcherConfig().to_dict()
        defaults.update(super().default_configuration())
        return defaults

    def summary(self) -> str:
        config = self.config
        return f"{config.token_match} = {config.value_match}"

    def evaluate(self) -> bool:
        config = self.config
        token_data = self.get_token_data()
        self._logger.debug("condition.token_data", token_types=sorted(token_data.keys()))

        token_replaced = self._token.replace(config.token_match, token_data, clear=True)
        value_replaced = self._token.replace(config.value_match, token_data, clear=True)

        if config.check_empty:
            return is_empty(token_replaced)

        if config.use_regex:
            try:
                pattern = compile_pattern(value_replaced)
            except InvalidPatternError as e:
                self._logger.warning("condition.invalid_pattern", pattern=e.pattern, reason=e.reason)
                raise
            return pattern.search(token_replaced)

        return token_replaced == value_replaced

    def get_token_data(self) -> Dict[str, Entity]:
        """
        Contextual entities keyed by token type. Entity types with no live
        request attribute are left out.
        """
        token_data: Dict[str, Entity] = {}
        for entity_type_id, token_type in self.get_content_token_types().items():
            entity = self.get_pseudo_context_value(entity_type_id)
            if entity is not None:
                token_data[token_type] = entity
        return token_data

    def get_content_token_types(self) -> Dict[str, str]:
        token_types: Dict[str, str] = {}
        for entity_type_id, definition in self._entity_types.get_definitions().items():
            if definition.is_content_entity_type():
                token_types[entity_type_id] = self._get_token_type(definition)
        return token_types

    def _get_token_type(self, definition: EntityTypeDefinition) -> str:
        return definition.get_token_type()

    def get_pseudo_context_value(self, entity_type_id: str) -> Optional[Entity]:
        """
        Entity of the given type from the current request's attributes.

        Stop-gap until contexts carry these values; None when absent.
        """
        request = self._request_stack.get_current_request()
        if request is None:
            return None
        attributes = request.attributes
        if not attributes.has(entity_type_id):
            return None
        value = attributes.get(entity_type_id)
        if isinstance(value, Entity) and value.is_content_entity():
            return value
        return None

    def form_elements(self) -> List[FormElement]:
        config = self.config
        elements: List[FormElement] = [
            FormElement(
                name="token_match",
                type="textfield",
                title="Source value",
                description="Enter token or string with multiple tokens to be used as source value in the evaluation.",
                default_value=config.token_match,
                states=[
                    StateRule(
                        action="required",
                        conditions=[
                            FieldCondition(field="value_match", trigger="empty", value=False),
                            FieldCondition(field="check_empty", trigger="checked", value=True),
                        ],
                        combinator="or",
                    )
                ],
            ),
            self._tokens_element(),
            FormElement(
                name="check_empty",
                type="checkbox",
                title="Check if value is empty",
                description=(
                    "Instead of comparing the source string with the expected value, check to see "
                    "whether it evaluates to an empty/null/zero value (after replacing any tokens it contains)."
                ),
                default_value=config.check_empty,
            ),
        ]

        invisible = [
            StateRule(
                action="invisible",
                conditions=[FieldCondition(field="check_empty", trigger="checked", value=True)],
            )
        ]
        elements.append(
            FormElement(
                name="value_match",
                type="textfield",
                title="Expected value",
                description="Enter string to check against. This can also contain tokens.",
                default_value=config.value_match,
                states=invisible,
            )
        )
        elements.append(
            FormElement(
                name="use_regex",
                type="checkbox",
                title="Use regex match",
                default_value=config.use_regex,
                states=invisible,
            )
        )
        return elements

    def _tokens_element(self) -> FormElement:
        if self._module_handler.module_exists(TOKEN_MODULE):
            return FormElement(
                name="tokens",
                type="token_tree_link",
                title="Tokens",
                properties={
                    "token_types": sorted(set(self.get_content_token_types().values())),
                    "global_types": True,
                    "dialog": True,
                },
            )
        return FormElement(
            name="tokens",
            type="markup",
            weight=99,
            properties={
                "markup": (
                    "Note: You don't have the Token module installed, so the list of available "
                    "tokens isn't shown here. You don't have to install Token to be able to use "
                    "tokens, but if you have it installed, and enabled, you'll be able to enjoy "
                    f"an interactive tokens browser. ({TOKEN_MODULE_URL})"
                ),
            },
        )

    def validate_configuration_form(self, values: Dict[str, Any]) -> None:
        schema = self.build_configuration_form()
        errors = FormValidator().find_errors(schema, values)

        submitted = TokenMatcherConfig.from_dict(values)
        # Patterns built from tokens can only be checked at evaluation time.
        if (
            submitted.use_regex
            and not submitted.check_empty
            and "value_match" not in errors
            and not TOKEN_PATTERN.search(submitted.value_match)
        ):
            try:
                compile_pattern(submitted.value_match)
            except InvalidPatternError as e:
                errors["value_match"] = str(e)

        if errors:
            raise ValidationError("; ".join(errors.values()), errors=errors)

    def submit_configuration_form(self, values: Dict[str, Any]) -> None:
        submitted = TokenMatcherConfig.from_dict(values)
        self.configuration["token_match"] = submitted.token_match
        self.configuration["check_empty"] = submitted.check_empty
        self.configuration["value_match"] = submitted.value_match
        self.configuration["use_regex"] = submitted.use_regex
        super().submit_configuration_form(values)
