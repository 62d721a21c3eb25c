"""Tests for person mapping and name parsing."""

import pytest

from citemeta.mapping import new_codemeta, parse_people, person_to_schema
from citemeta.models import Person
from citemeta.parse.names import parse_name, parse_people_string, split_names

# ---------------------------------------------------------------------------
# Schema.org mapping
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_person_with_orcid(jane: Person) -> None:
    """Test persons carry ORCID as @id and split names."""
    assert person_to_schema(jane) == {
        "@type": "Person",
        "@id": "https://orcid.org/0000-0002-1825-0097",
        "givenName": "Jane",
        "familyName": "Smith",
        "email": "jane@example.org",
    }


@pytest.mark.unit
def test_orcid_url_kept() -> None:
    """Test an ORCID already given as URL is not prefixed twice."""
    person = Person(
        given=("A",), family="B", comment={"ORCID": "https://orcid.org/0000-0001-2345-6789"}
    )

    assert person_to_schema(person)["@id"] == "https://orcid.org/0000-0001-2345-6789"


@pytest.mark.unit
def test_organization_without_given_names() -> None:
    """Test a name without given names is an organization."""
    assert person_to_schema(Person(family="R Core Team")) == {
        "@type": "Organization",
        "name": "R Core Team",
    }


@pytest.mark.unit
def test_parse_people_places_by_role(jane: Person) -> None:
    """Test roles route persons to CodeMeta properties."""
    maintainer = Person(given=("Max",), family="Keeper", role=("cre", "aut"))
    helper = Person(given=("Hal",), family="Per", role=("ctb",))
    unknown = Person(given=("Ursula",), family="Known", role=("xyz",))

    result = parse_people([jane, maintainer, helper, unknown], new_codemeta())

    assert [p["familyName"] for p in result["author"]] == ["Smith", "Keeper"]
    assert [p["familyName"] for p in result["maintainer"]] == ["Keeper"]
    assert [p["familyName"] for p in result["contributor"]] == ["Per"]
    assert "funder" not in result


@pytest.mark.unit
@pytest.mark.parametrize("people", [None, [], ()])
def test_parse_people_empty_adds_nothing(people: list[Person] | None) -> None:
    """Test absent authors leave the mapping without an author key."""
    result = parse_people(people, new_codemeta())

    assert result == new_codemeta()
    assert "author" not in result


@pytest.mark.unit
def test_parse_people_does_not_modify_input(jane: Person) -> None:
    """Test the given CodeMeta mapping is copied, not mutated."""
    codemeta = new_codemeta()
    parse_people([jane], codemeta)

    assert "author" not in codemeta


# ---------------------------------------------------------------------------
# Name strings
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_split_names_respects_braces() -> None:
    """Test ' and ' inside braces does not split."""
    assert split_names("Jane Smith and {Barnes and Noble} and Bob Jones") == [
        "Jane Smith",
        "{Barnes and Noble}",
        "Bob Jones",
    ]


@pytest.mark.unit
@pytest.mark.parametrize(
    ("text", "given", "family"),
    [
        ("Jane Smith", ("Jane",), "Smith"),
        ("Smith, Jane", ("Jane",), "Smith"),
        ("John Q. Public", ("John", "Q."), "Public"),
        ("Public, John Q.", ("John", "Q."), "Public"),
        ("{R Core Team}", (), "R Core Team"),
        ("Plato", (), "Plato"),
    ],
)
def test_parse_name_spellings(text: str, given: tuple[str, ...], family: str) -> None:
    """Test both name orders and organizations."""
    person = parse_name(text)

    assert person.given == given
    assert person.family == family


@pytest.mark.unit
def test_parse_name_annotations() -> None:
    """Test email, roles and ORCID comment are extracted."""
    person = parse_name(
        "Jane Smith <jane@example.org> [aut, cre] (ORCID: 0000-0002-1825-0097)"
    )

    assert person == Person(
        given=("Jane",),
        family="Smith",
        email="jane@example.org",
        role=("aut", "cre"),
        comment={"ORCID": "0000-0002-1825-0097"},
    )


@pytest.mark.unit
def test_parse_people_string() -> None:
    """Test an and-separated author field yields persons in order."""
    people = parse_people_string("Jane Smith and Public, John")

    assert [p.family for p in people] == ["Smith", "Public"]
