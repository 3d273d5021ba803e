import asyncio
from pathlib import Path

import pytest
import yaml

from api2html.converter import UnresolvedReference, UnsupportedDocument, convert
from api2html.converter.samples import property_rows, sample_value
from api2html.converter.refs import RefResolver
from api2html.core import parse_document
from api2html.languages import DEFAULT_LANGUAGES
from api2html.models import ConversionOptions
from api2html.renderer.frontmatter import split_front_matter


def build_options(**overrides) -> ConversionOptions:
    values = {"language_tabs": DEFAULT_LANGUAGES.entries}
    values.update(overrides)
    return ConversionOptions(**values)


def run_convert(document, **overrides) -> str:
    return asyncio.run(convert(document, build_options(**overrides)))


def test_front_matter_lists_language_tabs_and_theme(petstore):
    markdown = run_convert(petstore, language_tabs=(("python", "Python"), ("shell", "Shell")))
    front, body = split_front_matter(markdown)
    assert front["title"] == "Petstore 1.0.0"
    assert front["language_tabs"] == [{"python": "Python"}, {"shell": "Shell"}]
    assert front["highlight_theme"] == "darkula"
    assert front["headingLevel"] == 2
    assert front["search"] is True
    assert "# Petstore v1.0.0" in body


def test_operations_have_code_samples_per_language(petstore):
    markdown = run_convert(petstore)
    assert "## listPets {#listpets}" in markdown
    assert markdown.count("```shell") == 3
    assert markdown.count("```javascript--nodejs") == 3
    assert "`GET /pets`" in markdown
    assert "r = requests.get('https://petstore.example.com/v1/pets', headers=headers)" in markdown
    assert "  -H 'X-API-Key: API_KEY'" in markdown


def test_parameters_and_body_rows(petstore):
    markdown = run_convert(petstore)
    assert "|limit|query|integer(int32)|false|How many items to return at one time|" in markdown
    assert "|petId|path|string|true|none|" in markdown
    assert "|body|body|[Pet](#schemapet)|true|none|" in markdown
    assert "|» id|body|integer(int64)|true|none|" in markdown


def test_omit_body_drops_synthetic_body_parameter(petstore):
    markdown = run_convert(petstore, omit_body=True)
    assert "|body|body|" not in markdown
    assert "> Body parameter" in markdown


def test_responses_tables_and_security(petstore):
    markdown = run_convert(petstore)
    assert "|200|OK|A paged array of pets|[[Pet](#schemapet)]|" in markdown
    assert "|default|Default|unexpected error|[Error](#schemaerror)|" in markdown
    assert "|200|x-next|string||A link to the next page of responses|" in markdown
    assert "following methods: api_key</aside>" in markdown
    assert "This operation does not require authentication" in markdown


def test_toc_summary_uses_operation_summary(petstore):
    markdown = run_convert(petstore, toc_summary=True)
    assert "## List all pets {#listpets}" in markdown
    assert "## listPets" not in markdown


def test_sample_values_versus_raw_schema(petstore):
    sampled = run_convert(petstore)
    assert '"name": "doggie"' in sampled
    assert '"type": "array"' not in sampled

    raw = run_convert(petstore, sample=False)
    assert '"type": "array"' in raw


def test_schemas_section(petstore):
    markdown = run_convert(petstore)
    assert '<a id="schemapet"></a>' in markdown
    assert "## Pet {#tocS_pet}" in markdown
    assert "|owner|[Owner](#schemaowner)|false|none|none|" in markdown


def test_includes_listed_in_front_matter(petstore):
    markdown = run_convert(petstore, includes=("errors.md", "intro.md"))
    front, _ = split_front_matter(markdown)
    assert front["includes"] == ["errors.md", "intro.md"]


def test_conversion_is_deterministic(petstore):
    assert run_convert(petstore) == run_convert(petstore)


def test_swagger2_document():
    document = yaml.safe_load(
        """
swagger: "2.0"
info: {title: Legacy, version: "2.1"}
host: api.example.com
basePath: /v2
schemes: [https]
paths:
  /users:
    post:
      operationId: addUser
      consumes: [application/json]
      produces: [application/json]
      parameters:
        - in: body
          name: body
          required: true
          schema: {$ref: "#/definitions/User"}
      responses:
        "200":
          description: ok
          schema: {$ref: "#/definitions/User"}
definitions:
  User:
    type: object
    properties:
      name: {type: string}
"""
    )
    markdown = run_convert(document)
    assert '<a href="https://api.example.com/v2">https://api.example.com/v2</a>' in markdown
    assert "# Default {#default}" in markdown
    assert "|body|body|[User](#schemauser)|true|none|" in markdown
    assert "## User {#tocS_user}" in markdown
    assert '"name": "string"' in markdown


def test_unsupported_document_rejected():
    with pytest.raises(UnsupportedDocument):
        run_convert({"title": "not a spec"})


def test_external_refs_need_resolution(tmp_path: Path):
    (tmp_path / "common.yaml").write_text(
        "Error:\n  type: object\n  properties:\n    reason: {type: string, example: broken}\n",
        encoding="utf-8",
    )
    root = tmp_path / "api.yaml"
    document = {
        "openapi": "3.0.0",
        "info": {"title": "Split", "version": "1"},
        "paths": {
            "/fail": {
                "get": {
                    "responses": {
                        "500": {
                            "description": "boom",
                            "content": {"application/json": {"schema": {"$ref": "common.yaml#/Error"}}},
                        }
                    }
                }
            }
        },
    }
    with pytest.raises(UnresolvedReference):
        run_convert(document)

    markdown = run_convert(document, resolve=True, source=str(root))
    assert '"reason": "broken"' in markdown


def test_external_refs_fetched_relative_to_url():
    requested: list[str] = []

    def fake_fetch(url: str) -> str:
        requested.append(url)
        return "Error:\n  type: object\n  properties:\n    code: {type: integer, example: 7}\n"

    document = {
        "openapi": "3.0.0",
        "info": {"title": "Remote", "version": "1"},
        "paths": {
            "/x": {
                "get": {
                    "responses": {
                        "400": {
                            "description": "bad",
                            "content": {"application/json": {"schema": {"$ref": "common.yaml#/Error"}}},
                        }
                    }
                }
            }
        },
    }
    options = build_options(resolve=True, source="https://example.com/specs/api.yaml")
    markdown = asyncio.run(convert(document, options, fetch=fake_fetch))
    assert requested == ["https://example.com/specs/common.yaml"]
    assert '"code": 7' in markdown


def test_sample_value_breaks_reference_cycles(petstore):
    resolver = RefResolver(petstore)
    value = sample_value({"$ref": "#/components/schemas/Pet"}, resolver)
    assert value["owner"]["pets"] == [{}]


def test_property_rows_nest_with_markers(petstore):
    resolver = RefResolver(petstore)
    rows = property_rows({"$ref": "#/components/schemas/Pet"}, resolver)
    names = [row.name for row in rows]
    assert names[:4] == ["id", "name", "tag", "owner"]
    assert "» email" in names


def test_unquoted_dates_stay_iso_strings():
    document = parse_document(
        """
openapi: 3.0.0
info: {title: Dated, version: "1"}
paths:
  /events:
    post:
      operationId: addEvent
      requestBody:
        content:
          application/json:
            schema: {$ref: "#/components/schemas/Event"}
      responses:
        "201": {description: created}
components:
  schemas:
    Event:
      type: object
      properties:
        day: {type: string, format: date, example: 2020-01-01}
        since: {type: string, format: date, default: 2019-12-31}
        window: {type: string, enum: [2021-06-01, 2021-07-01]}
"""
    )
    markdown = run_convert(document)
    assert '"day": "2020-01-01"' in markdown
    assert '"since": "2019-12-31"' in markdown
    assert '"window": "2021-06-01"' in markdown


def test_hard_line_breaks_in_descriptions_survive():
    document = {
        "openapi": "3.0.0",
        "info": {"title": "Breaks", "version": "1", "description": "First line  \nSecond line"},
        "paths": {},
    }
    assert "First line  \nSecond line" in run_convert(document)
