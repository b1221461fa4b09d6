"""
Realm DTOs - Application Layer

This module defines the Data Transfer Objects that validate a realm
configuration document and convert it into domain entities.

A check carries its checker as a flattened sibling of ``name``::

    {"name": "ssh", "tcp": {"port": 22}}

The tag key selects the checker variant and its value is the variant's
configuration payload.
"""

from __future__ import annotations

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from uptimer.domain.entities.realm import (
    MAX_PORT,
    Check,
    DummyCheckerConfig,
    HttpCheckerConfig,
    Realm,
    Service,
    TcpCheckerConfig,
)


class DummyCheckerDTO(BaseModel):
    """Payload of the ``dummy`` checker: an empty object."""

    kind: Literal["dummy"] = "dummy"

    model_config = ConfigDict(extra="forbid")

    def to_domain(self) -> DummyCheckerConfig:
        return DummyCheckerConfig()


class TcpCheckerDTO(BaseModel):
    """Payload of the ``tcp`` checker."""

    kind: Literal["tcp"] = "tcp"
    port: int = Field(
        ..., ge=0, le=MAX_PORT, strict=True, description="TCP port to connect to"
    )

    model_config = ConfigDict(extra="forbid")

    def to_domain(self) -> TcpCheckerConfig:
        return TcpCheckerConfig(port=self.port)


class HttpCheckerDTO(BaseModel):
    """Payload of the ``http`` checker."""

    kind: Literal["http"] = "http"
    port: Optional[int] = Field(
        default=None,
        ge=0,
        le=MAX_PORT,
        strict=True,
        description="Port to use instead of the scheme default",
    )
    path: str = Field(default="/", description="Request path")
    scheme: Literal["http", "https"] = Field(default="http", description="URL scheme")
    expected_status: Optional[int] = Field(
        default=None,
        ge=100,
        le=599,
        strict=True,
        description="Exact status required; any status below 400 when unset",
    )

    model_config = ConfigDict(extra="forbid")

    def to_domain(self) -> HttpCheckerConfig:
        return HttpCheckerConfig(
            port=self.port,
            path=self.path,
            scheme=self.scheme,
            expected_status=self.expected_status,
        )


CheckerDTO = Annotated[
    Union[DummyCheckerDTO, TcpCheckerDTO, HttpCheckerDTO],
    Field(discriminator="kind"),
]

CHECKER_TAGS = ("dummy", "tcp", "http")


class CheckDTO(BaseModel):
    """A named check with exactly one flattened checker tag."""

    name: str = Field(..., min_length=1, description="Display name of the check")
    checker: CheckerDTO

    @model_validator(mode="before")
    @classmethod
    def _unflatten_checker(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        tags = [key for key in data if key != "name"]
        unknown = [tag for tag in tags if tag not in CHECKER_TAGS]
        if unknown:
            raise ValueError(
                f"unknown checker tag(s) {', '.join(map(repr, unknown))}; "
                f"expected one of {', '.join(CHECKER_TAGS)}"
            )
        if not tags:
            raise ValueError(
                f"check must declare a checker, one of {', '.join(CHECKER_TAGS)}"
            )
        if len(tags) > 1:
            raise ValueError(
                f"check declares several checkers ({', '.join(tags)}); "
                "exactly one is allowed"
            )

        tag = tags[0]
        payload = data[tag]
        if not isinstance(payload, dict):
            raise ValueError(f"'{tag}' checker configuration must be an object")

        unflattened = {"checker": {**payload, "kind": tag}}
        if "name" in data:
            unflattened["name"] = data["name"]
        return unflattened

    def to_domain(self) -> Check:
        return Check(name=self.name, checker=self.checker.to_domain())


class ServiceDTO(BaseModel):
    """A monitored service and the hosts its checks run against."""

    name: str = Field(..., min_length=1, description="Service name")
    description: Optional[str] = Field(default=None, description="Free text")
    tags: Optional[List[str]] = Field(default=None, description="Labels")
    checks: List[CheckDTO] = Field(..., description="Checks to run")
    hosts: List[str] = Field(..., description="Host names or addresses")

    model_config = ConfigDict(extra="ignore")

    def to_domain(self) -> Service:
        return Service(
            name=self.name,
            checks=tuple(check.to_domain() for check in self.checks),
            hosts=tuple(self.hosts),
            description=self.description,
            tags=tuple(self.tags) if self.tags is not None else None,
        )


class RealmDTO(BaseModel):
    """Root of the configuration document."""

    services: List[ServiceDTO] = Field(..., description="Monitored services")

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "services": [
                    {
                        "name": "web",
                        "description": "Public web tier",
                        "tags": ["prod"],
                        "checks": [
                            {"name": "reachability", "tcp": {"port": 443}},
                            {"name": "homepage", "http": {"scheme": "https"}},
                        ],
                        "hosts": ["web-1.example.com", "web-2.example.com"],
                    }
                ]
            }
        },
    )

    def to_domain(self) -> Realm:
        return Realm(services=tuple(service.to_domain() for service in self.services))
