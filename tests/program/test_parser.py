"""Tests for tree-sitter based Go declaration indexing."""

from __future__ import annotations

import textwrap
from pathlib import Path

from awsmocker.program.parser import GoParser
from awsmocker.program.symbols import TypeRef

PKG = "example.com/app/store"


def _parse(tmp_path: Path, source: str, name: str = "store.go"):
    path = tmp_path / name
    path.write_text(textwrap.dedent(source).lstrip("\n"), encoding="utf-8")
    return GoParser().parse_file(path)


def test_parse_file_reads_package_and_imports(tmp_path: Path) -> None:
    source_file = _parse(
        tmp_path,
        """
        package store

        import (
        	"context"
        	_ "embed"
        	ddb "github.com/aws/aws-sdk-go-v2/service/dynamodb"
        	"github.com/aws/aws-sdk-go-v2/service/sts"
        )
        """,
    )

    assert source_file.package_name == "store"
    assert source_file.imports == {
        "context": "context",
        "ddb": "github.com/aws/aws-sdk-go-v2/service/dynamodb",
        "sts": "github.com/aws/aws-sdk-go-v2/service/sts",
    }


def test_collect_declarations_indexes_package_members(tmp_path: Path) -> None:
    parser = GoParser()
    source_file = _parse(
        tmp_path,
        """
        package store

        import (
        	"context"

        	"github.com/aws/aws-sdk-go-v2/service/dynamodb"
        )

        const tableName = "things"

        var (
        	defaultStore = &Store{}
        	limit        int32
        )

        type Store struct {
        	db        *dynamodb.Client
        	name, env string
        	*Base
        }

        type Base struct{}

        type Lister interface {
        	List(ctx context.Context) ([]string, error)
        }

        type Alias = Store

        func New(db *dynamodb.Client) *Store {
        	return &Store{db: db}
        }

        func (s *Store) Tables(ctx context.Context, prefixes ...string) ([]string, error) {
        	return nil, nil
        }
        """,
    )

    decls = parser.collect_declarations([source_file], PKG, "store")

    assert decls.ref.name == "store"
    assert decls.scope == "package store"
    assert decls.funcs["New"].results == (TypeRef("Store", PKG, pointer=True),)
    assert decls.funcs["New"].params == (
        TypeRef("Client", "github.com/aws/aws-sdk-go-v2/service/dynamodb", pointer=True),
    )
    tables = decls.methods["Store"]["Tables"]
    assert tables.variadic is True
    assert [str(result) for result in tables.results] == ["[]string", "error"]

    store = decls.types["Store"]
    assert str(store.fields["db"]) == "*github.com/aws/aws-sdk-go-v2/service/dynamodb.Client"
    assert store.fields["name"] == TypeRef("string")
    assert store.fields["env"] == TypeRef("string")
    assert store.embedded == [TypeRef("Base", PKG, pointer=True)]
    assert "List" in decls.types["Lister"].methods
    assert decls.types["Alias"].alias_of == TypeRef("Store", PKG)
    assert decls.vars == {"defaultStore": TypeRef("Store", PKG, pointer=True), "limit": TypeRef("int32")}
    assert decls.consts == {"tableName"}


def test_syntax_errors_are_reported_with_positions(tmp_path: Path) -> None:
    source_file = _parse(
        tmp_path,
        """
        package store

        func broken( {
        	return
        }
        """,
    )

    diagnostics = GoParser.syntax_errors(source_file)

    assert diagnostics
    assert all(d.position is not None and d.position.filename.endswith("store.go") for d in diagnostics)
    assert all(d.message.startswith("syntax error") for d in diagnostics)


def test_clean_files_have_no_syntax_errors(tmp_path: Path) -> None:
    source_file = _parse(tmp_path, "package store\n\nfunc ok() {}\n")

    assert GoParser.syntax_errors(source_file) == []


def test_ignore_build_constraint(tmp_path: Path) -> None:
    ignored = _parse(tmp_path, "//go:build ignore\n\npackage main\n", name="gen.go")
    kept = _parse(tmp_path, "//go:build linux\n\npackage store\n", name="linux.go")

    assert GoParser.is_ignored(ignored) is True
    assert GoParser.is_ignored(kept) is False
