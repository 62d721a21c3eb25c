"""Tests for the R CITATION reader."""

from datetime import date
from pathlib import Path

import pytest

from citemeta.exceptions import CitationSyntaxError
from citemeta.models import BibEntry, Person
from citemeta.parse.rcitation import parse_rcitation, tokenize

META = {"Package": "demo", "Version": "1.2.3", "Date": "2021-05-01", "Encoding": "UTF-8"}


def _one(text: str, meta: dict[str, str] | None = None) -> BibEntry:
    entries = parse_rcitation(text, meta)
    assert len(entries) == 1
    return entries[0]


# ---------------------------------------------------------------------------
# Lexer
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_tokenize_drops_comments_and_tracks_lines() -> None:
    """Test comments vanish and tokens keep their line numbers."""
    tokens = tokenize('# header\nx <- "a # not a comment"\n')

    assert [(t.kind, t.value, t.line) for t in tokens] == [
        ("name", "x", 2),
        ("op", "<-", 2),
        ("string", '"a # not a comment"', 2),
    ]


@pytest.mark.unit
def test_tokenize_rejects_unsupported_input() -> None:
    """Test characters outside the subset raise with a line number."""
    with pytest.raises(CitationSyntaxError) as exc_info:
        tokenize('x <- 1\ny <- x + 2')

    assert exc_info.value.line == 2


# ---------------------------------------------------------------------------
# Entries
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_bibentry_fields() -> None:
    """Test literal fields keep their declared types."""
    entry = _one(
        'bibentry(bibtype = "Article", key = "k", title = "T", journal = "J",\n'
        '         year = 2020, volume = 12, number = "3", pages = "1--10",\n'
        '         doi = "10.1000/xyz", url = "https://example.org", note = "n")'
    )

    assert entry == BibEntry(
        bibtype="Article",
        key="k",
        title="T",
        journal="J",
        year=2020,
        volume=12,
        number="3",
        pages="1--10",
        doi="10.1000/xyz",
        url="https://example.org",
        note="n",
    )


@pytest.mark.unit
def test_positional_bibtype_and_extra_fields() -> None:
    """Test the first positional argument is the type; unknown fields go to extra."""
    entry = _one('bibentry("Book", title = "T", publisher = "P", textVersion = "ignored")')

    assert entry.bibtype == "Book"
    assert entry.extra == {"publisher": "P"}


@pytest.mark.unit
def test_citentry_uses_entry_argument() -> None:
    """Test legacy citEntry() declarations."""
    entry = _one('citEntry(entry = "Manual", title = "demo")')

    assert entry.bibtype == "Manual"
    assert entry.title == "demo"


@pytest.mark.unit
def test_missing_bibtype_raises() -> None:
    """Test an entry without a type fails with R's wording."""
    with pytest.raises(CitationSyntaxError, match='argument "bibtype" is missing'):
        parse_rcitation('bibentry(title = "T")')


@pytest.mark.unit
def test_meta_fields_and_string_functions() -> None:
    """Test meta$ access with sub(), sprintf() and paste()."""
    entry = _one(
        'year <- sub("-.*", "", meta$Date)\n'
        'note <- sprintf("R package version %s", meta$Version)\n'
        'bibentry("Manual", title = paste("Package", meta$Package, sep = ": "),\n'
        "         year = year, note = note)",
        META,
    )

    assert entry.year == "2021"
    assert entry.note == "R package version 1.2.3"
    assert entry.title == "Package: demo"


@pytest.mark.unit
def test_missing_meta_yields_absent_fields() -> None:
    """Test meta$ fields evaluate to NULL without metadata."""
    entry = _one(
        'bibentry("Manual", title = "demo", year = sub("-.*", "", meta$Date),\n'
        '         note = sprintf("R package version %s", meta$Version))'
    )

    assert entry.year is None
    assert entry.note is None


@pytest.mark.unit
def test_format_sys_date() -> None:
    """Test the common current-year idiom."""
    entry = _one('bibentry("Manual", title = "t", year = format(Sys.Date(), "%Y"))')

    assert entry.year == str(date.today().year)


@pytest.mark.unit
def test_paste0_gsub_and_vectors() -> None:
    """Test vectorized paste0 with collapse and gsub replacement."""
    entry = _one(
        'bibentry("Misc", title = paste0(c("a", "b"), "-", collapse = "+"),\n'
        '         note = gsub("o", "0", "foo boo"))'
    )

    assert entry.title == "a-+b-"
    assert entry.note == "f00 b00"


@pytest.mark.unit
def test_collects_assigned_and_multiple_entries() -> None:
    """Test entries are collected in source order, assignments included."""
    entries = parse_rcitation(
        'first <- bibentry("Article", title = "One")\n'
        'citHeader("header")\n'
        'bibentry("Book", title = "Two"); bibentry("Misc", title = "Three")\n'
        'citFooter("footer")'
    )

    assert [e.title for e in entries] == ["One", "Two", "Three"]


@pytest.mark.unit
def test_equals_assignment_and_escapes() -> None:
    """Test '=' assignment and string escapes."""
    entry = _one('t = "Caf\\u00e9 \\"quoted\\""\nbibentry("Misc", title = t)')

    assert entry.title == 'Café "quoted"'


@pytest.mark.unit
def test_numeric_doi_kept_as_text() -> None:
    """Test a DOI written as a number becomes a string."""
    entry = _one('bibentry("Misc", title = "T", doi = 12345)')

    assert entry.doi == "12345"


# ---------------------------------------------------------------------------
# Control flow
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_meta_preamble(fixtures_dir: Path) -> None:
    """Test the usual packageDescription() fallback preamble."""
    text = (fixtures_dir / "CITATION_preamble").read_text(encoding="utf-8")

    entry = _one(text, META)

    assert entry.title == "demo: Demonstration Package"
    assert entry.year == "2021"
    assert entry.note == "R package version 1.2.3"


@pytest.mark.unit
def test_meta_preamble_without_metadata(fixtures_dir: Path) -> None:
    """Test the preamble evaluates when no metadata is bound."""
    text = (fixtures_dir / "CITATION_preamble").read_text(encoding="utf-8")

    entry = _one(text)

    assert entry.year is None
    assert entry.note is None


@pytest.mark.unit
def test_if_else_with_blocks() -> None:
    """Test braced blocks run in order and else branches are taken."""
    entry = _one(
        'if (TRUE) { a <- "x"; b <- "y" } else a <- "z"\n'
        'if (FALSE) { b <- "never" }\n'
        'bibentry("Misc", title = paste(a, b))'
    )

    assert entry.title == "x y"


@pytest.mark.unit
def test_if_value_is_collected() -> None:
    """Test an entry produced by a branch is collected."""
    entry = _one('if (FALSE) bibentry("Misc", title = "no") else bibentry("Misc", title = "yes")')

    assert entry.title == "yes"


@pytest.mark.unit
def test_logical_operators_short_circuit() -> None:
    """Test the right operand is skipped when the left decides."""
    entry = _one(
        'if (FALSE && undefined) x <- "a" else x <- "b"\n'
        'if (TRUE || undefined) y <- "c"\n'
        'if (!is.null(NULL)) y <- "d"\n'
        'bibentry("Misc", title = paste0(x, y))'
    )

    assert entry.title == "bc"


@pytest.mark.unit
def test_exists_and_package_description_fields() -> None:
    """Test exists() and packageDescription(fields = ...)."""
    entry = _one(
        'v <- packageDescription("demo", fields = "Version")\n'
        'if (exists("v") && !exists("undefined")) bibentry("Misc", title = v)',
        META,
    )

    assert entry.title == "1.2.3"


@pytest.mark.unit
def test_null_condition_raises() -> None:
    """Test an if() on NULL fails like R."""
    with pytest.raises(CitationSyntaxError, match="argument is of length zero"):
        parse_rcitation("if (meta$Version) x <- 1")


@pytest.mark.unit
def test_unclosed_block_raises() -> None:
    """Test a block without its closing brace is a syntax error."""
    with pytest.raises(CitationSyntaxError, match="unexpected end of input"):
        parse_rcitation('if (TRUE) { x <- "a"')


# ---------------------------------------------------------------------------
# Persons
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_person_calls() -> None:
    """Test person() with positional and named arguments."""
    entry = _one(
        'bibentry("Article", title = "T",\n'
        '  author = c(person("Jane", "Smith", email = "jane@example.org",\n'
        '                    role = c("aut", "cre"),\n'
        '                    comment = c(ORCID = "0000-0002-1825-0097")),\n'
        '             person(given = c("John", "Q."), family = "Public"),\n'
        '             person("R Core Team")))'
    )

    assert entry.author == (
        Person(
            given=("Jane",),
            family="Smith",
            email="jane@example.org",
            role=("aut", "cre"),
            comment={"ORCID": "0000-0002-1825-0097"},
        ),
        Person(given=("John", "Q."), family="Public"),
        Person(given=("R Core Team",)),
    )


@pytest.mark.unit
def test_as_person_and_person_list() -> None:
    """Test string authors parsed through as.person() and personList()."""
    entry = _one(
        'bibentry("Article", title = "T",\n'
        '  author = personList(as.person("Jane Smith [aut]"), as.person("{R Core Team}")))'
    )

    assert entry.author == (
        Person(given=("Jane",), family="Smith", role=("aut",)),
        Person(family="R Core Team"),
    )


@pytest.mark.unit
def test_plain_string_author() -> None:
    """Test a bare author string is split on ' and '."""
    entry = _one('bibentry("Article", title = "T", author = "Jane Smith and John Public")')

    assert [p.family for p in entry.author] == ["Smith", "Public"]


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_self_citation_call_error_message() -> None:
    """Test citation() calls fail quoting the call text."""
    with pytest.raises(CitationSyntaxError) as exc_info:
        parse_rcitation('bibentry("Misc", title = "T")\ncitation(auto = meta)\n', META)

    assert str(exc_info.value).startswith("Error in citation(auto = meta) :")
    assert exc_info.value.line == 2


@pytest.mark.unit
def test_unknown_function() -> None:
    """Test calls outside the supported subset fail."""
    with pytest.raises(CitationSyntaxError, match='could not find function "readLines"'):
        parse_rcitation('x <- readLines("f")')


@pytest.mark.unit
def test_undefined_variable() -> None:
    """Test references to unknown objects fail."""
    with pytest.raises(CitationSyntaxError, match="object 'undefined' not found"):
        parse_rcitation('bibentry("Misc", title = undefined)')


@pytest.mark.unit
def test_unclosed_call(fixtures_dir: Path) -> None:
    """Test an unterminated call is a syntax error unrelated to citation()."""
    text = (fixtures_dir / "CITATION_syntax_error").read_text(encoding="utf-8")

    with pytest.raises(CitationSyntaxError, match="unexpected end of input") as exc_info:
        parse_rcitation(text)

    assert "Error in" not in str(exc_info.value)
