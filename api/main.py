"""FastAPI アプリケーション - 条件プラグインのホスト API"""
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import Body, FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

import sys

# プロジェクトルートをPythonパスに追加
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from application.conditions.registry import ConditionPluginRegistry
from application.ports.logger import LoggerPort
from application.services.condition_deps import ConditionDeps
from application.services.condition_service import ConditionService
from application.services.token_replacer import TokenReplacer
from domain.entity import EntityKind
from domain.exceptions import (
    ConditionNotFoundError,
    InvalidPatternError,
    PluginNotFoundError,
    ValidationError,
)
from domain.request import Request
from infrastructure.conditions.file_condition_store import FileConditionStore
from infrastructure.entity.entity_factory import build_request
from infrastructure.entity.in_memory_entity_type_registry import InMemoryEntityTypeRegistry
from infrastructure.logging.composite_logger import CompositeLogger
from infrastructure.logging.console_logger import ConsoleLogger
from infrastructure.logging.log_setup import setup_console_logging
from infrastructure.logging.loguru_logger import LoguruLogger
from infrastructure.modules.static_module_handler import StaticModuleHandler
from infrastructure.request.request_stack import RequestStack
from infrastructure.settings.env_settings import load_settings


# リクエストモデル
class EntityPayload(BaseModel):
    """Contextual entity carried as a request attribute"""
    entity_type: str = Field(description="Entity type id, e.g. 'node'")
    id: Optional[Any] = Field(default=None, description="Entity id")
    bundle: str = Field(default="", description="Bundle (e.g. 'article')")
    label: str = Field(default="", description="Entity label")
    values: Dict[str, Any] = Field(default_factory=dict, description="Field values")
    kind: EntityKind = Field(default=EntityKind.CONTENT, description="content or config")


class EvaluateRequest(BaseModel):
    """条件評価リクエスト"""
    path: str = Field(default="/", description="Request path")
    entities: Dict[str, EntityPayload] = Field(
        default_factory=dict,
        description="Request attributes holding entities, keyed by attribute name",
    )
    attributes: Dict[str, Any] = Field(
        default_factory=dict,
        description="Plain (non-entity) request attributes",
    )


class SaveConditionRequest(BaseModel):
    """条件設定の保存リクエスト"""
    plugin_id: Optional[str] = Field(default=None, description="Plugin id for new conditions")
    values: Dict[str, Any] = Field(default_factory=dict, description="Submitted form values")


class EvaluateResponse(BaseModel):
    condition_id: str
    result: bool
    summary: str


class ConditionResponse(BaseModel):
    id: str
    plugin_id: str
    label: str
    configuration: Dict[str, Any]
    summary: str


class ValidationErrorResponse(BaseModel):
    message: str
    errors: Dict[str, str] = Field(default_factory=dict)


# FastAPIアプリケーション
app = FastAPI(
    title="Token Conditions",
    description="トークン文字列を期待値と比較する条件プラグイン",
    version="1.0.0",
)

# 設定
SETTINGS = load_settings()
setup_console_logging(SETTINGS.log_level)
STORE = FileConditionStore(SETTINGS.store_path)
ENTITY_TYPES = (
    InMemoryEntityTypeRegistry.from_file(SETTINGS.entity_types_path)
    if SETTINGS.entity_types_path
    else InMemoryEntityTypeRegistry.default()
)
PLUGINS = ConditionPluginRegistry.default()


@app.get("/")
def read_root():
    """ヘルスチェック"""
    return {"status": "ok", "service": "token-conditions", "plugins": PLUGINS.plugin_ids()}


def _build_logger() -> LoggerPort:
    if SETTINGS.log_format == "loguru":
        return LoguruLogger()
    if SETTINGS.log_format == "both":
        return CompositeLogger([ConsoleLogger(level=SETTINGS.log_level), LoguruLogger()])
    return ConsoleLogger(level=SETTINGS.log_level)


def _build_token_service() -> TokenReplacer:
    return TokenReplacer(
        global_providers={
            "site": {"name": SETTINGS.site_name},
            "current-date": _current_date,
        }
    )


def _current_date() -> Dict[str, Any]:
    now = datetime.now(timezone.utc)
    return {"iso": now.isoformat(), "timestamp": int(now.timestamp()), "date": now.date().isoformat()}


def _build_request(payload: Optional[EvaluateRequest]) -> Request:
    payload = payload or EvaluateRequest()
    return build_request(
        entities={key: entity.model_dump() for key, entity in payload.entities.items()},
        attributes=payload.attributes,
        path=payload.path,
    )


def _build_deps(request: Optional[Request] = None) -> ConditionDeps:
    request_stack = RequestStack()
    if request is not None:
        request_stack.push(request)
    return ConditionDeps(
        token_service=_build_token_service(),
        entity_type_registry=ENTITY_TYPES,
        request_stack=request_stack,
        module_handler=StaticModuleHandler(enabled=SETTINGS.modules),
        logger=_build_logger(),
    )


def _service() -> ConditionService:
    return ConditionService(STORE, PLUGINS)


@app.get("/plugins/{plugin_id}/form")
def get_configuration_form(
    plugin_id: str,
    condition_id: Optional[str] = Query(default=None),
) -> Dict[str, Any]:
    """設定フォームのスキーマを返す"""
    try:
        schema = _service().build_form(plugin_id, _build_deps(), condition_id=condition_id)
    except (PluginNotFoundError, ConditionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    return schema.to_dict()


@app.get("/conditions", response_model=List[ConditionResponse])
def list_conditions() -> List[ConditionResponse]:
    deps = _build_deps()
    service = _service()
    return [_to_response(record, service, deps) for record in STORE.list()]


@app.get("/conditions/{condition_id}", response_model=ConditionResponse)
def get_condition(condition_id: str) -> ConditionResponse:
    service = _service()
    try:
        record = service.get(condition_id)
        return _to_response(record, service, _build_deps())
    except (PluginNotFoundError, ConditionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))


@app.put("/conditions/{condition_id}", response_model=ConditionResponse)
def save_condition(condition_id: str, request: SaveConditionRequest = Body(...)) -> ConditionResponse:
    """
    フォーム送信値を検証して保存する

    Args:
        condition_id: 条件ID
        request: plugin_id（新規作成時）と送信値
    """
    service = _service()
    deps = _build_deps()
    try:
        record = service.save_configuration(
            condition_id, request.values, deps, plugin_id=request.plugin_id
        )
    except (PluginNotFoundError, ConditionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValidationError as e:
        raise HTTPException(
            status_code=400,
            detail=ValidationErrorResponse(message=str(e), errors=e.errors).model_dump(),
        )
    return _to_response(record, service, deps)


@app.post("/conditions/{condition_id}/evaluate", response_model=EvaluateResponse)
def evaluate_condition(
    condition_id: str,
    request: Optional[EvaluateRequest] = Body(default=None),
) -> EvaluateResponse:
    """現在のリクエスト属性に対して条件を評価する"""
    deps = _build_deps(_build_request(request))
    try:
        outcome = _service().evaluate(condition_id, deps)
    except (PluginNotFoundError, ConditionNotFoundError) as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvalidPatternError as e:
        deps.logger.error("condition.evaluate_failed", condition_id=condition_id, error=str(e))
        raise HTTPException(status_code=422, detail=str(e))
    return EvaluateResponse(
        condition_id=outcome.condition_id,
        result=outcome.result,
        summary=outcome.summary,
    )


def _to_response(record, service: ConditionService, deps: ConditionDeps) -> ConditionResponse:
    plugin = service.create_plugin(record, deps)
    return ConditionResponse(
        id=record.id,
        plugin_id=record.plugin_id,
        label=record.label,
        configuration=plugin.get_configuration(),
        summary=plugin.summary(),
    )
