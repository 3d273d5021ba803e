"""Request code samples, one builder per language tab."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Callable
from urllib.parse import urlsplit


@dataclass(slots=True)
class SnippetContext:
    method: str
    url: str
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: Any = None
    has_body: bool = False

    @property
    def verb(self) -> str:
        return self.method.upper()

    @property
    def body_json(self) -> str:
        return json.dumps(self.body, indent=2, ensure_ascii=False)


def _shell(ctx: SnippetContext) -> str:
    lines = ["# You can also use wget", f"curl -X {ctx.verb} {ctx.url}"]
    for name, value in ctx.headers:
        lines.append(f"  -H '{name}: {value}'")
    if ctx.has_body:
        compact = json.dumps(ctx.body, ensure_ascii=False).replace("'", "'\\''")
        lines.append(f"  -d '{compact}'")
    return " \\\n".join(lines)


def _http(ctx: SnippetContext) -> str:
    parts = urlsplit(ctx.url)
    target = parts.path or "/"
    if parts.query:
        target = f"{target}?{parts.query}"
    lines = [f"{ctx.verb} {target} HTTP/1.1"]
    if parts.netloc:
        lines.append(f"Host: {parts.netloc}")
    lines.extend(f"{name}: {value}" for name, value in ctx.headers)
    if ctx.has_body:
        lines.extend(["", ctx.body_json])
    return "\n".join(lines)


def _header_object(ctx: SnippetContext, indent: str = "  ") -> list[str]:
    lines = ["const headers = {"]
    lines.extend(f"{indent}'{name}':'{value}'," for name, value in ctx.headers)
    lines.append("};")
    return lines


def _javascript(ctx: SnippetContext) -> str:
    lines: list[str] = []
    if ctx.has_body:
        lines.append(f"const inputBody = {ctx.body_json};")
    lines.extend(_header_object(ctx))
    lines.extend(["", f"fetch('{ctx.url}',", "{", f"  method: '{ctx.verb}',"])
    if ctx.has_body:
        lines.append("  body: JSON.stringify(inputBody),")
    lines.extend(
        [
            "  headers: headers",
            "})",
            ".then(function(res) {",
            "    return res.json();",
            "}).then(function(body) {",
            "    console.log(body);",
            "});",
        ]
    )
    return "\n".join(lines)


def _nodejs(ctx: SnippetContext) -> str:
    return "const fetch = require('node-fetch');\n" + _javascript(ctx)


def _ruby(ctx: SnippetContext) -> str:
    lines = ["require 'rest-client'", "require 'json'", "", "headers = {"]
    lines.extend(f"  '{name}' => '{value}'," for name, value in ctx.headers)
    lines.extend(["}", ""])
    if ctx.has_body:
        lines.extend([f"body = {ctx.body_json}", ""])
        lines.append(f"result = RestClient.{ctx.method} '{ctx.url}', body.to_json, headers: headers")
    else:
        lines.append(f"result = RestClient.{ctx.method} '{ctx.url}', headers: headers")
    lines.extend(["", "p JSON.parse(result)"])
    return "\n".join(lines)


def _python(ctx: SnippetContext) -> str:
    lines = ["import requests", "", "headers = {"]
    lines.extend(f"  '{name}': '{value}'," for name, value in ctx.headers)
    lines.extend(["}", ""])
    if ctx.has_body:
        lines.extend([f"payload = {ctx.body_json}", ""])
        lines.append(f"r = requests.{ctx.method}('{ctx.url}', json=payload, headers=headers)")
    else:
        lines.append(f"r = requests.{ctx.method}('{ctx.url}', headers=headers)")
    lines.extend(["", "print(r.json())"])
    return "\n".join(lines)


def _java(ctx: SnippetContext) -> str:
    lines = [
        f'URL obj = new URL("{ctx.url}");',
        "HttpURLConnection con = (HttpURLConnection) obj.openConnection();",
        f'con.setRequestMethod("{ctx.verb}");',
    ]
    lines.extend(f'con.setRequestProperty("{name}", "{value}");' for name, value in ctx.headers)
    if ctx.has_body:
        payload = json.dumps(json.dumps(ctx.body, ensure_ascii=False))
        lines.extend(
            [
                "con.setDoOutput(true);",
                "try (OutputStream os = con.getOutputStream()) {",
                f"    os.write({payload}.getBytes(\"utf-8\"));",
                "}",
            ]
        )
    lines.extend(
        [
            "int responseCode = con.getResponseCode();",
            "BufferedReader in = new BufferedReader(",
            "    new InputStreamReader(con.getInputStream()));",
            "String inputLine;",
            "StringBuffer response = new StringBuffer();",
            "while ((inputLine = in.readLine()) != null) {",
            "    response.append(inputLine);",
            "}",
            "in.close();",
            "System.out.println(response.toString());",
        ]
    )
    return "\n".join(lines)


def _go(ctx: SnippetContext) -> str:
    lines = ["package main", "", "import (", '    "bytes"', '    "net/http"', ")", "", "func main() {", ""]
    lines.append("    headers := map[string][]string{")
    lines.extend(f'        "{name}": []string{{"{value}"}},' for name, value in ctx.headers)
    lines.extend(["    }", ""])
    if ctx.has_body:
        payload = json.dumps(json.dumps(ctx.body, ensure_ascii=False))
        lines.append(f"    data := bytes.NewBuffer([]byte({payload}))")
    else:
        lines.append("    data := bytes.NewBuffer([]byte{})")
    lines.extend(
        [
            f'    req, err := http.NewRequest("{ctx.verb}", "{ctx.url}", data)',
            "    req.Header = headers",
            "",
            "    client := &http.Client{}",
            "    resp, err := client.Do(req)",
            "    // ...",
            "}",
        ]
    )
    return "\n".join(lines)


def _php(ctx: SnippetContext) -> str:
    lines = ["<?php", "", "require 'vendor/autoload.php';", "", "$headers = array("]
    lines.extend(f"    '{name}' => '{value}'," for name, value in ctx.headers)
    lines.extend([");", "", "$client = new \\GuzzleHttp\\Client();", ""])
    options = ["        'headers' => $headers,"]
    if ctx.has_body:
        lines.extend([f"$request_body = json_decode('{json.dumps(ctx.body, ensure_ascii=False)}', true);", ""])
        options.append("        'json' => $request_body,")
    lines.extend(["try {", f"    $response = $client->request('{ctx.verb}', '{ctx.url}', array("])
    lines.extend(options)
    lines.extend(
        [
            "    ));",
            "    print_r($response->getBody()->getContents());",
            "}",
            "catch (\\GuzzleHttp\\Exception\\BadResponseException $e) {",
            "    print_r($e->getMessage());",
            "}",
        ]
    )
    return "\n".join(lines)


BUILDERS: dict[str, Callable[[SnippetContext], str]] = {
    "shell": _shell,
    "http": _http,
    "javascript": _javascript,
    "javascript--nodejs": _nodejs,
    "ruby": _ruby,
    "python": _python,
    "java": _java,
    "go": _go,
    "php": _php,
}


def build_snippet(language: str, ctx: SnippetContext) -> str | None:
    builder = BUILDERS.get(language.lower())
    if builder is None:
        return None
    return builder(ctx)


__all__ = ["SnippetContext", "BUILDERS", "build_snippet"]
