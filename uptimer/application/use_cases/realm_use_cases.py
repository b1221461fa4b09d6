"""Use cases for loading a realm and running its checks."""

from __future__ import annotations

import asyncio
from typing import Any, List, Mapping, Optional, Union

from pydantic import ValidationError

from uptimer.application.dtos.realm_dto import RealmDTO
from uptimer.application.dtos.report_dto import ReportDTO
from uptimer.domain.entities.errors import ConfigurationError
from uptimer.domain.entities.realm import Realm
from uptimer.domain.entities.report import Report
from uptimer.infrastructure.services.execution_engine import ExecutionEngine
from uptimer.shared import get_logger

logger = get_logger(__name__)

RealmDocument = Union[str, bytes, bytearray, Mapping[str, Any]]


class LoadRealmUseCase:
    """Use case responsible for turning a configuration document into a Realm."""

    def execute(self, document: RealmDocument) -> Realm:
        """Validate ``document`` (JSON text or decoded mapping).

        Raises:
            ConfigurationError: Listing every problem found in the document.
        """
        try:
            if isinstance(document, (str, bytes, bytearray)):
                dto = RealmDTO.model_validate_json(document)
            else:
                dto = RealmDTO.model_validate(document)
        except ValidationError as exc:
            errors = [self._format_error(error) for error in exc.errors()]
            logger.warning("realm.load.failed", errors=errors)
            message = f"Invalid realm configuration: {errors[0]}"
            if len(errors) > 1:
                message += f" (and {len(errors) - 1} more)"
            raise ConfigurationError(message, details={"errors": errors}) from exc

        realm = dto.to_domain()
        logger.debug(
            "realm.load.succeeded",
            services=len(realm.services),
            work_items=realm.work_item_count,
        )
        return realm

    def _format_error(self, error: Mapping[str, Any]) -> str:
        location = ".".join(str(part) for part in error.get("loc", ()))
        message = str(error.get("msg", "invalid value"))
        return f"{location}: {message}" if location else message


class RunChecksUseCase:
    """Use case responsible for executing one pass over a realm."""

    def __init__(self, engine: ExecutionEngine) -> None:
        self._engine = engine

    async def execute(
        self, realm: Realm, *, cancel_event: Optional[asyncio.Event] = None
    ) -> ReportDTO:
        report = await self.run(realm, cancel_event=cancel_event)
        return ReportDTO.from_domain(report)

    async def run(
        self, realm: Realm, *, cancel_event: Optional[asyncio.Event] = None
    ) -> Report:
        return await self._engine.run(realm, cancel_event=cancel_event)


class DescribeRealmUseCase:
    """Use case summarizing the work a realm expands into, without probing."""

    def __init__(self, engine: ExecutionEngine) -> None:
        self._engine = engine

    def execute(self, realm: Realm) -> List[str]:
        """Return the ``service.check.host`` label of every work item."""
        return [item.label for item in self._engine.expand(realm)]
