"""Unit tests for core/references.py"""

import pytest

from mdspec.core.diagnostics import Reporter
from mdspec.core.references import ReferenceUpdater, build_link_map
from mdspec.core.sections import section_ref


LINK = "[§1.2](a.md#12-foo)"


@pytest.fixture(name="updater")
def updater_fixture():
    sections = [section_ref("a.md", "1.2 Foo"), section_ref("a.md", "Foreword")]
    return ReferenceUpdater(build_link_map(sections), Reporter())


def _codes(updater: ReferenceUpdater) -> list[str]:
    return [d.code for d in updater.reporter.diagnostics]


def test_link_map_only_numbered_sections():
    """Unnumbered sections have no §N reference."""
    links = build_link_map([section_ref("a.md", "1.2 Foo"), section_ref("a.md", "Foreword")])
    assert list(links) == ["§1.2"]
    assert links["§1.2"].markdown == LINK


def test_plain_reference_linked(updater):
    """A bare reference becomes a link; sentence punctuation stays outside it."""
    assert updater.process_line("See §1.2.") == f"See {LINK}."


def test_existing_link_replaced(updater):
    """An existing link around the reference is refreshed, not nested."""
    assert updater.process_line("See [§1.2](old.md#x) and more.") == f"See {LINK} and more."


def test_several_references_on_one_line(updater):
    """Every reference on a line is processed."""
    assert updater.process_line("§1.2, [§1.2](b.md#y)") == f"{LINK}, {LINK}"


def test_unknown_reference_untouched(updater):
    """Unknown references are reported and left as written."""
    line = "See [§9.9](x.md#old) and §8."
    assert updater.process_line(line) == line
    assert _codes(updater) == ["TOC002", "TOC002"]


def test_malformed_link_reported(updater):
    """A '[' before a reference without '](' after it is reported."""
    assert updater.process_line("[§1.2 text") == f"[{LINK} text"
    assert _codes(updater) == ["TOC003"]


def test_lone_section_sign_ignored(updater):
    """A § with no reference characters is not a reference."""
    assert updater.process_line("the § sign") == "the § sign"
    assert updater.reporter.diagnostics == []


def test_update_file_writes_changes(tmp_path, updater):
    """update_file rewrites the file when a reference changed."""
    f = tmp_path / "b.md"
    f.write_text("Intro\nSee §1.2.\n")
    assert updater.update_file(f) is True
    assert f.read_text() == f"Intro\nSee {LINK}.\n"


def test_update_file_dry_run(tmp_path, updater):
    """A dry run reports the change without writing."""
    f = tmp_path / "b.md"
    f.write_text("See §1.2.\n")
    assert updater.update_file(f, dry_run=True) is True
    assert f.read_text() == "See §1.2.\n"


def test_update_file_reports_line_numbers(tmp_path, updater):
    """Diagnostics point at the file and line of the reference."""
    f = tmp_path / "b.md"
    f.write_text("one\ntwo §7\n")
    assert updater.update_file(f) is False
    assert str(updater.reporter.diagnostics[0].location) == "b.md(2)"
