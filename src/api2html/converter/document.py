"""Version independent view over OpenAPI 3.x and Swagger 2.0 documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

from .refs import RefResolver

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")
DEFAULT_TAG = "Default"
JSON_MEDIA_TYPE = "application/json"


class UnsupportedDocument(ValueError):
    """The parsed data is not an OpenAPI or Swagger document."""


@dataclass(slots=True)
class Parameter:
    name: str
    location: str
    schema: dict[str, Any]
    required: bool = False
    description: str = ""


@dataclass(slots=True)
class RequestBody:
    content_type: str
    schema: dict[str, Any]
    required: bool = False
    description: str = ""
    example: Any = None


@dataclass(slots=True)
class Response:
    status: str
    description: str
    content_type: str | None = None
    schema: dict[str, Any] | None = None
    example: Any = None
    headers: dict[str, dict[str, Any]] = field(default_factory=dict)


@dataclass(slots=True)
class Operation:
    path: str
    method: str
    operation_id: str | None
    summary: str
    description: str
    tag: str
    parameters: list[Parameter]
    request_body: RequestBody | None
    responses: list[Response]
    security: list[dict[str, list[str]]]
    deprecated: bool = False

    @property
    def accept(self) -> str | None:
        for response in self.responses:
            if response.content_type:
                return response.content_type
        return None


def _first_media(content: Any) -> tuple[str | None, dict[str, Any]]:
    if not isinstance(content, dict) or not content:
        return None, {}
    media_type = JSON_MEDIA_TYPE if JSON_MEDIA_TYPE in content else next(iter(content))
    media = content.get(media_type) or {}
    return media_type, media if isinstance(media, dict) else {}


def _media_example(media: dict[str, Any]) -> Any:
    if "example" in media:
        return media["example"]
    examples = media.get("examples")
    if isinstance(examples, dict):
        for example in examples.values():
            if isinstance(example, dict) and "value" in example:
                return example["value"]
    return None


class ApiDocument:
    """Read access to the parts of a specification the Markdown needs."""

    def __init__(self, raw: dict[str, Any]) -> None:
        if not isinstance(raw, dict):
            raise UnsupportedDocument("The source document is not a mapping")
        openapi = str(raw.get("openapi", ""))
        swagger = str(raw.get("swagger", ""))
        if openapi.startswith("3"):
            self.version = 3
        elif swagger.startswith("2"):
            self.version = 2
        else:
            raise UnsupportedDocument("Missing or unsupported 'openapi'/'swagger' version field")
        self.raw = raw
        self.resolver = RefResolver(raw)

    @property
    def info(self) -> dict[str, Any]:
        info = self.raw.get("info")
        return info if isinstance(info, dict) else {}

    @property
    def title(self) -> str:
        return str(self.info.get("title") or "API")

    @property
    def api_version(self) -> str:
        return str(self.info.get("version") or "")

    @property
    def servers(self) -> list[str]:
        if self.version == 3:
            servers = self.raw.get("servers") or []
            urls = [str(server.get("url")) for server in servers if isinstance(server, dict) and server.get("url")]
            return urls or ["/"]
        host = self.raw.get("host")
        base_path = str(self.raw.get("basePath") or "")
        if not host:
            return [base_path or "/"]
        schemes = self.raw.get("schemes") or ["https"]
        return [f"{scheme}://{host}{base_path}" for scheme in schemes]

    @property
    def security_schemes(self) -> dict[str, dict[str, Any]]:
        if self.version == 3:
            schemes = (self.raw.get("components") or {}).get("securitySchemes") or {}
        else:
            schemes = self.raw.get("securityDefinitions") or {}
        return {name: self.resolver.deref(scheme) for name, scheme in schemes.items()}

    @property
    def schemas(self) -> dict[str, Any]:
        if self.version == 3:
            schemas = (self.raw.get("components") or {}).get("schemas") or {}
        else:
            schemas = self.raw.get("definitions") or {}
        return dict(schemas)

    @property
    def tag_descriptions(self) -> dict[str, str]:
        tags = self.raw.get("tags") or []
        return {
            str(tag["name"]): str(tag.get("description") or "")
            for tag in tags
            if isinstance(tag, dict) and tag.get("name")
        }

    def grouped_operations(self) -> dict[str, list[Operation]]:
        """Operations keyed by their first tag, declared tags first."""

        groups: dict[str, list[Operation]] = {name: [] for name in self.tag_descriptions}
        for operation in self.operations():
            groups.setdefault(operation.tag, []).append(operation)
        return {name: ops for name, ops in groups.items() if ops}

    def operations(self) -> Iterator[Operation]:
        paths = self.raw.get("paths") or {}
        for path, item in paths.items():
            item = self.resolver.deref(item)
            if not isinstance(item, dict):
                continue
            shared = item.get("parameters") or []
            for method in HTTP_METHODS:
                operation = item.get(method)
                if isinstance(operation, dict):
                    yield self._build_operation(str(path), method, operation, shared)

    def _build_operation(
        self, path: str, method: str, operation: dict[str, Any], shared: list[Any]
    ) -> Operation:
        tags = operation.get("tags") or []
        security = operation.get("security", self.raw.get("security")) or []
        parameters, body = self._parameters(operation, shared)
        if self.version == 3:
            body = self._request_body_v3(operation.get("requestBody"))
        return Operation(
            path=path,
            method=method,
            operation_id=operation.get("operationId"),
            summary=str(operation.get("summary") or ""),
            description=str(operation.get("description") or ""),
            tag=str(tags[0]) if tags else DEFAULT_TAG,
            parameters=parameters,
            request_body=body,
            responses=self._responses(operation, operation.get("responses") or {}),
            security=[entry for entry in security if isinstance(entry, dict)],
            deprecated=bool(operation.get("deprecated")),
        )

    def _parameters(
        self, operation: dict[str, Any], shared: list[Any]
    ) -> tuple[list[Parameter], RequestBody | None]:
        merged: dict[tuple[str, str], dict[str, Any]] = {}
        for raw_param in list(shared) + list(operation.get("parameters") or []):
            param = self.resolver.deref(raw_param)
            if isinstance(param, dict) and param.get("name"):
                merged[(str(param["name"]), str(param.get("in", "query")))] = param

        parameters: list[Parameter] = []
        body: RequestBody | None = None
        form_properties: dict[str, Any] = {}
        form_required: list[str] = []
        consumes = operation.get("consumes") or self.raw.get("consumes") or [JSON_MEDIA_TYPE]
        for (name, location), param in merged.items():
            if location == "body":
                body = RequestBody(
                    content_type=str(consumes[0]),
                    schema=param.get("schema") or {},
                    required=bool(param.get("required")),
                    description=str(param.get("description") or ""),
                )
                continue
            if location == "formData":
                form_properties[name] = self._v2_schema(param)
                if param.get("required"):
                    form_required.append(name)
                continue
            parameters.append(
                Parameter(
                    name=name,
                    location=location,
                    schema=param.get("schema") or self._v2_schema(param),
                    required=bool(param.get("required")) or location == "path",
                    description=str(param.get("description") or ""),
                )
            )
        if form_properties and body is None:
            form_type = next(
                (str(item) for item in consumes if "form" in str(item)), "application/x-www-form-urlencoded"
            )
            schema: dict[str, Any] = {"type": "object", "properties": form_properties}
            if form_required:
                schema["required"] = form_required
            body = RequestBody(content_type=form_type, schema=schema, required=bool(form_required))
        return parameters, body

    @staticmethod
    def _v2_schema(param: dict[str, Any]) -> dict[str, Any]:
        keys = ("type", "format", "items", "enum", "default", "minimum", "maximum")
        return {key: param[key] for key in keys if key in param}

    def _request_body_v3(self, raw_body: Any) -> RequestBody | None:
        body = self.resolver.deref(raw_body)
        if not isinstance(body, dict):
            return None
        media_type, media = _first_media(body.get("content"))
        if media_type is None:
            return None
        return RequestBody(
            content_type=media_type,
            schema=media.get("schema") or {},
            required=bool(body.get("required")),
            description=str(body.get("description") or ""),
            example=_media_example(media),
        )

    def _responses(self, operation: dict[str, Any], raw_responses: dict[str, Any]) -> list[Response]:
        produces = operation.get("produces") or self.raw.get("produces") or [JSON_MEDIA_TYPE]
        responses: list[Response] = []
        for status, raw_response in raw_responses.items():
            response = self.resolver.deref(raw_response)
            if not isinstance(response, dict):
                continue
            headers = {
                str(name): self.resolver.deref(header)
                for name, header in (response.get("headers") or {}).items()
            }
            if self.version == 3:
                media_type, media = _first_media(response.get("content"))
                schema = media.get("schema") if media_type else None
                example = _media_example(media) if media_type else None
            else:
                schema = response.get("schema")
                media_type = str(produces[0]) if schema else None
                examples = response.get("examples") or {}
                example = examples.get(media_type) if media_type else None
            responses.append(
                Response(
                    status=str(status),
                    description=str(response.get("description") or ""),
                    content_type=media_type,
                    schema=schema if isinstance(schema, dict) else None,
                    example=example,
                    headers=headers,
                )
            )
        return responses


__all__ = [
    "ApiDocument",
    "Operation",
    "Parameter",
    "RequestBody",
    "Response",
    "UnsupportedDocument",
    "DEFAULT_TAG",
    "HTTP_METHODS",
]
