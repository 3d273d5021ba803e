"""Slate flavoured Markdown for an :class:`ApiDocument`."""

from __future__ import annotations

import json
from http import HTTPStatus
from typing import Any

import yaml

from ..models import ConversionOptions
from ..utils import normalize_newlines, slugify
from .document import ApiDocument, Operation, Parameter, RequestBody, Response
from .samples import (
    describe_type,
    expand_schema,
    one_line,
    property_rows,
    sample_value,
)
from .snippets import SnippetContext, build_snippet

INTRO = (
    "> Scroll down for code samples, example requests and responses. "
    "Select a language for code samples from the tabs above or the mobile navigation menu."
)
GENERATOR_COMMENT = "<!-- Generator: api2html -->"


def _status_meaning(status: str) -> str:
    if status == "default":
        return "Default"
    try:
        return HTTPStatus(int(status)).phrase
    except ValueError:
        return "Unknown"


def _fence(language: str, body: str) -> list[str]:
    return [f"```{language}", body.rstrip("\n"), "```", ""]


def _table(header: list[str], rows: list[list[str]]) -> list[str]:
    lines = ["|" + "|".join(header) + "|", "|" + "|".join("---" for _ in header) + "|"]
    lines.extend("|" + "|".join(row) + "|" for row in rows)
    lines.append("")
    return lines


class MarkdownWriter:
    def __init__(self, api: ApiDocument, options: ConversionOptions) -> None:
        self._api = api
        self._options = options
        self._resolver = api.resolver
        self._lines: list[str] = []

    def render(self) -> str:
        self._lines = []
        self._front_matter()
        self._lines.extend([GENERATOR_COMMENT, ""])
        self._introduction()
        self._authentication()
        for tag, operations in self._api.grouped_operations().items():
            self._tag_section(tag, operations)
        self._schemas()
        return normalize_newlines("\n".join(self._lines))

    # front matter and introduction

    def _front_matter(self) -> None:
        tabs = self._options.language_tabs if self._options.code_samples else ()
        front: dict[str, Any] = {
            "title": f"{self._api.title} {self._api.api_version}".strip(),
            "language_tabs": [{key: label} for key, label in tabs],
            "language_clients": [{key: ""} for key, _ in tabs],
            "toc_footers": [],
            "includes": list(self._options.includes),
            "search": self._options.search,
            "highlight_theme": self._options.theme,
            "headingLevel": self._options.headings,
        }
        dumped = yaml.safe_dump(front, sort_keys=False, allow_unicode=True, default_flow_style=False)
        self._lines.extend(["---", dumped.rstrip("\n"), "---", ""])

    def _introduction(self) -> None:
        api = self._api
        heading = f"{api.title} v{api.api_version}" if api.api_version else api.title
        self._lines.extend([f"# {heading} {{#{slugify(heading)}}}", "", INTRO, ""])
        description = str(api.info.get("description") or "").strip()
        if description:
            self._lines.extend([description, ""])
        self._lines.append("Base URLs:")
        self._lines.append("")
        for url in api.servers:
            self._lines.append(f'* <a href="{url}">{url}</a>')
        self._lines.append("")

        terms = api.info.get("termsOfService")
        if terms:
            self._lines.extend([f'<a href="{terms}">Terms of service</a>', ""])
        contact = api.info.get("contact") or {}
        contact_parts: list[str] = []
        if contact.get("email"):
            contact_parts.append(f'Email: <a href="mailto:{contact["email"]}">{contact.get("name", "Support")}</a>')
        if contact.get("url"):
            contact_parts.append(f'Web: <a href="{contact["url"]}">{contact.get("name", "Support")}</a>')
        if contact_parts:
            self._lines.extend([" ".join(contact_parts), ""])
        license_info = api.info.get("license") or {}
        if license_info.get("name"):
            name = license_info["name"]
            url = license_info.get("url")
            self._lines.extend([f'License: <a href="{url}">{name}</a>' if url else f"License: {name}", ""])

    def _authentication(self) -> None:
        schemes = self._api.security_schemes
        if not schemes:
            return
        self._lines.extend(["# Authentication", ""])
        for name, scheme in schemes.items():
            kind = str(scheme.get("type", ""))
            if kind == "apiKey":
                self._lines.append(f"* API Key ({name})")
                self._lines.append(
                    f"    - Parameter Name: **{scheme.get('name', '')}**, in: {scheme.get('in', '')}. "
                    f"{one_line(scheme.get('description', ''))}".rstrip()
                )
            elif kind == "http" or kind == "basic":
                http_scheme = scheme.get("scheme", "basic")
                self._lines.append(f"- HTTP Authentication, scheme: {http_scheme} ({name})")
            elif kind == "oauth2":
                self._lines.append(f"- oAuth2 authentication ({name}).")
                for flow_name, flow in (scheme.get("flows") or {}).items():
                    self._lines.append(f"    - Flow: {flow_name}")
                    for key in ("authorizationUrl", "tokenUrl"):
                        if flow.get(key):
                            self._lines.append(f"    - {key}: [{flow[key]}]({flow[key]})")
                if scheme.get("flow"):
                    self._lines.append(f"    - Flow: {scheme['flow']}")
            elif kind == "openIdConnect":
                self._lines.append(f"- OpenID Connect ({name}): {scheme.get('openIdConnectUrl', '')}")
            else:
                self._lines.append(f"- {kind or 'Unknown'} authentication ({name})")
        self._lines.append("")

    # operations

    def _tag_section(self, tag: str, operations: list[Operation]) -> None:
        self._lines.extend([f"# {tag} {{#{slugify(tag)}}}", ""])
        description = self._api.tag_descriptions.get(tag, "").strip()
        if description:
            self._lines.extend([description, ""])
        for operation in operations:
            self._operation(operation)

    def _operation_title(self, operation: Operation) -> str:
        if self._options.toc_summary and operation.summary:
            return operation.summary
        if operation.operation_id:
            return operation.operation_id
        return operation.summary or f"{operation.method.upper()} {operation.path}"

    def _operation(self, operation: Operation) -> None:
        title = self._operation_title(operation)
        anchor = slugify(operation.operation_id or f"{operation.method}-{operation.path}")
        self._lines.extend([f"## {title} {{#{anchor}}}", ""])
        if operation.operation_id:
            self._lines.extend([f'<a id="opId{operation.operation_id}"></a>', ""])

        if self._options.code_samples and self._options.language_tabs:
            self._lines.extend(["> Code samples", ""])
            context = self._snippet_context(operation)
            for key, _ in self._options.language_tabs:
                snippet = build_snippet(key, context)
                if snippet is not None:
                    self._lines.extend(_fence(key, snippet))

        self._lines.extend([f"`{operation.method.upper()} {operation.path}`", ""])
        if operation.deprecated:
            self._lines.extend(['<aside class="warning">This operation is deprecated.</aside>', ""])
        if operation.summary and operation.summary != title:
            self._lines.extend([f"*{operation.summary}*", ""])
        if operation.description:
            self._lines.extend([operation.description.strip(), ""])

        if operation.request_body is not None:
            self._lines.extend(["> Body parameter", ""])
            self._lines.extend(self._payload_block(operation.request_body.content_type, self._body_example(operation.request_body)))

        self._parameters(anchor, operation)
        self._example_responses(operation)
        self._responses(anchor, operation)
        self._security(operation)

    def _snippet_context(self, operation: Operation) -> SnippetContext:
        server = self._api.servers[0].rstrip("/")
        url = f"{server}{operation.path}"
        query = [
            f"{param.name}={self._scalar(sample_value(param.schema, self._resolver))}"
            for param in operation.parameters
            if param.location == "query" and param.required
        ]
        if query:
            url = f"{url}?{'&'.join(query)}"
        headers: list[tuple[str, str]] = []
        body = operation.request_body
        if body is not None:
            headers.append(("Content-Type", body.content_type))
        if operation.accept:
            headers.append(("Accept", operation.accept))
        for param in operation.parameters:
            if param.location == "header" and param.required:
                headers.append((param.name, self._scalar(sample_value(param.schema, self._resolver))))
        auth = self._auth_header(operation)
        if auth is not None:
            headers.append(auth)
        return SnippetContext(
            method=operation.method,
            url=url,
            headers=headers,
            body=self._body_example(body) if body is not None else None,
            has_body=body is not None,
        )

    def _auth_header(self, operation: Operation) -> tuple[str, str] | None:
        schemes = self._api.security_schemes
        for requirement in operation.security:
            for name in requirement:
                scheme = schemes.get(name) or {}
                kind = scheme.get("type")
                if kind == "apiKey" and scheme.get("in") == "header":
                    return str(scheme.get("name", name)), "API_KEY"
                if kind == "basic" or (kind == "http" and scheme.get("scheme") == "basic"):
                    return "Authorization", "Basic {credentials}"
                if kind in {"http", "oauth2", "openIdConnect"}:
                    return "Authorization", "Bearer {access-token}"
        return None

    @staticmethod
    def _scalar(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if value is None:
            return ""
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)

    def _body_example(self, body: RequestBody) -> Any:
        if body.example is not None:
            return body.example
        if self._options.sample:
            return sample_value(body.schema, self._resolver)
        return expand_schema(body.schema, self._resolver)

    def _payload_block(self, content_type: str | None, value: Any) -> list[str]:
        content_type = content_type or ""
        if "yaml" in content_type:
            dumped = yaml.safe_dump(value, sort_keys=False, allow_unicode=True)
            return _fence("yaml", dumped)
        return _fence("json", json.dumps(value, indent=2, ensure_ascii=False))

    def _parameters(self, anchor: str, operation: Operation) -> None:
        rows: list[list[str]] = []
        for param in operation.parameters:
            rows.append(self._parameter_row(param))
        body = operation.request_body
        if body is not None and not self._options.omit_body:
            rows.append(
                [
                    "body",
                    "body",
                    describe_type(body.schema, self._resolver),
                    str(body.required).lower(),
                    one_line(body.description or "none"),
                ]
            )
            depth = 1 if self._options.shallow_schemas else 3
            for prop in property_rows(body.schema, self._resolver, prefix="» ", max_depth=depth):
                rows.append([prop.name, "body", prop.type, str(prop.required).lower(), prop.description])
        if not rows:
            return
        self._lines.extend([f"### Parameters {{#{anchor}-parameters}}", ""])
        self._lines.extend(_table(["Name", "In", "Type", "Required", "Description"], rows))

    def _parameter_row(self, param: Parameter) -> list[str]:
        return [
            param.name,
            param.location,
            describe_type(param.schema, self._resolver),
            str(param.required).lower(),
            one_line(param.description or "none"),
        ]

    def _response_value(self, response: Response) -> Any:
        if response.example is not None:
            return response.example
        if self._options.sample:
            return sample_value(response.schema, self._resolver)
        return expand_schema(response.schema, self._resolver)

    def _example_responses(self, operation: Operation) -> None:
        examples = [response for response in operation.responses if response.schema is not None]
        if not examples:
            return
        self._lines.extend(["> Example responses", ""])
        for response in examples:
            self._lines.extend([f"> {response.status} Response", ""])
            self._lines.extend(self._payload_block(response.content_type, self._response_value(response)))

    def _responses(self, anchor: str, operation: Operation) -> None:
        if not operation.responses:
            return
        rows = [
            [
                response.status,
                _status_meaning(response.status),
                one_line(response.description or "none"),
                describe_type(response.schema, self._resolver) if response.schema is not None else "None",
            ]
            for response in operation.responses
        ]
        self._lines.extend([f"### Responses {{#{anchor}-responses}}", ""])
        self._lines.extend(_table(["Status", "Meaning", "Description", "Schema"], rows))

        header_rows: list[list[str]] = []
        for response in operation.responses:
            for name, header in response.headers.items():
                schema = header.get("schema") or header
                header_rows.append(
                    [
                        response.status,
                        name,
                        str(schema.get("type", "string")),
                        str(schema.get("format", "")),
                        one_line(header.get("description") or "none"),
                    ]
                )
        if header_rows:
            self._lines.extend([f"### Response Headers {{#{anchor}-responseheaders}}", ""])
            self._lines.extend(_table(["Status", "Header", "Type", "Format", "Description"], header_rows))

    def _security(self, operation: Operation) -> None:
        names = [name for requirement in operation.security for name in requirement]
        if names:
            self._lines.extend(
                [
                    '<aside class="warning">To perform this operation, you must be authenticated by means '
                    f"of one of the following methods: {', '.join(dict.fromkeys(names))}</aside>",
                    "",
                ]
            )
        else:
            self._lines.extend(['<aside class="success">This operation does not require authentication</aside>', ""])

    # schemas

    def _schemas(self) -> None:
        schemas = self._api.schemas
        if not schemas:
            return
        self._lines.extend(["# Schemas {#schemas}", ""])
        for name, schema in schemas.items():
            ref = {"$ref": self._schema_ref(name)}
            self._lines.extend([f'<a id="schema{name.lower()}"></a>', ""])
            self._lines.extend([f"## {name} {{#tocS_{slugify(name)}}}", ""])
            value = sample_value(ref, self._resolver) if self._options.sample else expand_schema(schema, self._resolver)
            self._lines.extend(_fence("json", json.dumps(value, indent=2, ensure_ascii=False)))
            concrete = self._resolver.deref(schema)
            if isinstance(concrete, dict) and concrete.get("description"):
                self._lines.extend([str(concrete["description"]).strip(), ""])
            rows = property_rows(ref, self._resolver)
            if rows:
                self._lines.extend(["### Properties", ""])
                self._lines.extend(
                    _table(
                        ["Name", "Type", "Required", "Restrictions", "Description"],
                        [[row.name, row.type, str(row.required).lower(), row.restrictions, row.description] for row in rows],
                    )
                )

    def _schema_ref(self, name: str) -> str:
        token = name.replace("~", "~0").replace("/", "~1")
        if self._api.version == 3:
            return f"#/components/schemas/{token}"
        return f"#/definitions/{token}"


__all__ = ["MarkdownWriter", "INTRO", "GENERATOR_COMMENT"]
