"""Tests for the Jinja2 mock template renderer."""

from __future__ import annotations

from pathlib import Path

import pytest

from awsmocker.errors import RenderFailure
from awsmocker.models import FunctionSignature, PackageBucket, TemplateData
from awsmocker.naming import NamingResolver
from awsmocker.render import TemplateRenderer

DYNAMODB_PATH = "github.com/aws/aws-sdk-go-v2/service/dynamodb"
STS_PATH = "github.com/aws/aws-sdk-go-v2/service/sts"


def _packages() -> list[PackageBucket]:
    return [
        PackageBucket(
            path=DYNAMODB_PATH,
            short_name="dynamodb",
            signatures=[
                FunctionSignature("BatchGetItem", "BatchGetItemOutput"),
                FunctionSignature("ListTables", "ListTablesOutput"),
            ],
        ),
        PackageBucket(
            path=STS_PATH,
            short_name="sts",
            signatures=[FunctionSignature("GetCallerIdentity", "GetCallerIdentityOutput")],
        ),
    ]


def test_render_emits_a_mock_per_package() -> None:
    output = TemplateRenderer().render(TemplateData(False, "awsmocked", _packages()))

    assert output.startswith("// Code generated by aws-mocker. DO NOT EDIT.")
    assert "package awsmocked\n" in output
    assert f'\t"{DYNAMODB_PATH}"\n' in output
    assert f'\t"{STS_PATH}"\n' in output
    assert "type DynamoDBMock struct {" in output
    assert "type STSMock struct {" in output
    assert (
        "\tListTablesFunc func(ctx context.Context, params *dynamodb.ListTablesInput) "
        "(*dynamodb.ListTablesOutput, error)"
    ) in output
    assert "func NewDynamoDBClient(mock *DynamoDBMock) *dynamodb.Client {" in output
    assert "func (d *DynamoDBMock) Options() func(*dynamodb.Options) {" in output
    assert "func (s *STSMock) handle(" in output
    assert 'case "GetCallerIdentity":' in output
    assert output.endswith("}\n")


def test_render_orders_output_like_the_input() -> None:
    output = TemplateRenderer().render(TemplateData(False, "awsmocked", _packages()))

    assert output.index("DynamoDBMock struct") < output.index("STSMock struct")
    assert output.index('case "BatchGetItem"') < output.index('case "ListTables"')


def test_client_default_adds_panicking_fallback() -> None:
    renderer = TemplateRenderer()

    with_default = renderer.render(TemplateData(True, "awsmocked", _packages()))
    without_default = renderer.render(TemplateData(False, "awsmocked", _packages()))

    assert "\tdefault:\n" in with_default
    assert "panic(fmt.Sprintf(" in with_default
    assert '\t"fmt"\n' in with_default
    assert "default:" not in without_default
    assert "panic(" not in without_default
    assert '"fmt"' not in without_default
    assert "return next.HandleInitialize(ctx, in)" in without_default


def test_render_without_packages_has_no_imports() -> None:
    output = TemplateRenderer().render(TemplateData(True, "emptymocks", []))

    assert "package emptymocks" in output
    assert "import" not in output


def test_service_name_overrides_flow_into_the_template() -> None:
    renderer = TemplateRenderer(NamingResolver({"sts": "SecurityToken"}))

    output = renderer.render(TemplateData(False, "awsmocked", _packages()))

    assert "type SecurityTokenMock struct {" in output


def test_custom_templates_dir_takes_precedence(tmp_path: Path) -> None:
    (tmp_path / "mock.go.j2").write_text(
        "package {{ package_name }}\n"
        "{% for pkg in packages %}// {{ pkg.short_name | ToTitle }} {{ LowerCaseFirst(pkg.short_name) }}\n{% endfor %}",
        encoding="utf-8",
    )

    output = TemplateRenderer(templates_dir=tmp_path).render(TemplateData(False, "custom", _packages()))

    assert output == "package custom\n// DynamoDB dynamodb\n// STS sts\n"


def test_missing_template_raises_render_failure(tmp_path: Path) -> None:
    renderer = TemplateRenderer(templates_dir=tmp_path, template_name="absent.go.j2")

    with pytest.raises(RenderFailure):
        renderer.render(TemplateData(False, "awsmocked", []))


def test_template_syntax_error_raises_render_failure(tmp_path: Path) -> None:
    (tmp_path / "broken.go.j2").write_text("{% for pkg in packages %}", encoding="utf-8")
    renderer = TemplateRenderer(templates_dir=tmp_path, template_name="broken.go.j2")

    with pytest.raises(RenderFailure):
        renderer.render(TemplateData(False, "awsmocked", []))


def test_undefined_names_raise_render_failure(tmp_path: Path) -> None:
    (tmp_path / "strict.go.j2").write_text("package {{ missing_name }}\n", encoding="utf-8")
    renderer = TemplateRenderer(templates_dir=tmp_path, template_name="strict.go.j2")

    with pytest.raises(RenderFailure):
        renderer.render(TemplateData(False, "awsmocked", []))
