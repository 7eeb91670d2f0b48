"""
Tests for the syntax locator and edit planner.
"""

import sys
from pathlib import Path

# Add the project root to the path
sys.path.insert(0, str(Path(__file__).parent.parent))

from ngimport.core.locator import (
    array_elements,
    find_decorator,
    find_property_array,
    has_named_import,
    last_import_end,
)
from ngimport.core.planner import LEFT, RIGHT, Insertion, plan_edits
from ngimport.core.source import SourceFile


MODULE_TEXT = (
    "import { NgModule } from '@angular/core';\n"
    "import { CommonModule } from '@angular/common';\n"
    "\n"
    "@NgModule({\n"
    "  declarations: [],\n"
    "  imports: [CommonModule, RouterModule.forRoot(routes)],\n"
    "})\n"
    "export class AppModule {}\n"
)


def test_has_named_import_is_textual():
    source = SourceFile("app.module.ts", MODULE_TEXT)
    assert has_named_import(source, "NgModule", "@angular/core")
    assert not has_named_import(source, "NgModule", "@angular/common")
    assert not has_named_import(source, "Injectable", "@angular/core")
    assert not has_named_import(source, "NgModule", "@angular/core", quote='"')


def test_last_import_end():
    source = SourceFile("app.module.ts", MODULE_TEXT)
    second_line_end = MODULE_TEXT.index("\n\n@NgModule")
    assert last_import_end(source) == second_line_end
    assert last_import_end(SourceFile("x.ts", "class X {}\n")) == 0


def test_finds_decorator_and_imports_array():
    source = SourceFile("app.module.ts", MODULE_TEXT)
    decorator = find_decorator(source, "NgModule")
    assert decorator is not None
    assert source.node_text(decorator).startswith("@NgModule(")

    array = find_property_array(source, decorator, "imports")
    assert array is not None
    assert [source.node_text(el) for el in array_elements(array)] == [
        "CommonModule",
        "RouterModule.forRoot(routes)",
    ]
    assert find_property_array(source, decorator, "providers") is None


def test_decorator_absent():
    source = SourceFile("x.ts", "@Injectable()\nexport class Service {}\n")
    assert find_decorator(source, "NgModule") is None


def test_comments_are_not_elements_or_arguments():
    text = "@NgModule(/* cfg */ { imports: [A /* first */, B] })\nclass M {}\n"
    source = SourceFile("x.ts", text)
    array = find_property_array(source, find_decorator(source, "NgModule"), "imports")
    assert [source.node_text(el) for el in array_elements(array)] == ["A", "B"]


def test_plan_edits_positions():
    source = SourceFile("app.module.ts", MODULE_TEXT)
    edits = plan_edits(source, "HttpClientModule", "@angular/common/http")
    anchor = MODULE_TEXT.index("RouterModule.forRoot(routes)") + len("RouterModule.forRoot(routes)")
    assert edits == [
        Insertion(
            last_import_end(source),
            "\nimport { HttpClientModule } from '@angular/common/http';\n",
            LEFT,
        ),
        Insertion(anchor, ",\n    HttpClientModule", RIGHT),
    ]


def test_plan_edits_nothing_to_do():
    source = SourceFile("app.module.ts", MODULE_TEXT)
    assert plan_edits(source, "CommonModule", "@angular/common") == []


def test_tsx_files_parse():
    text = (
        "import { A } from 'a';\n"
        "const view = <div>hi</div>;\n"
        "@NgModule({ imports: [A] })\n"
        "class M {}\n"
    )
    source = SourceFile("view.tsx", text)
    assert has_named_import(source, "A", "a")
    assert find_decorator(source, "NgModule") is not None
