"""Person and organization mapping to schema.org.

Persons are placed into a CodeMeta mapping under the property that matches
their MARC relator role. Citations only read the ``author`` property.
"""

from collections.abc import Iterable, Mapping
from typing import Any

from citemeta.models import Person
from citemeta.utils import drop_null

__all__ = [
    "CODEMETA_CONTEXT",
    "ORCID_BASE_URL",
    "ROLE_PROPERTIES",
    "new_codemeta",
    "parse_people",
    "person_to_schema",
]

CODEMETA_CONTEXT = "https://doi.org/10.5063/schema/codemeta-2.0"
ORCID_BASE_URL = "https://orcid.org/"

# MARC relator code -> CodeMeta property
ROLE_PROPERTIES: dict[str, str] = {
    "aut": "author",
    "cre": "maintainer",
    "ctb": "contributor",
    "cph": "copyrightHolder",
    "fnd": "funder",
}


def new_codemeta() -> dict[str, Any]:
    """Return an empty CodeMeta mapping."""
    return {"@context": CODEMETA_CONTEXT, "@type": "SoftwareSourceCode"}


def person_to_schema(person: Person) -> dict[str, Any]:
    """Convert one person to a schema.org Person or Organization.

    Parameters
    ----------
    person : Person
        Source person.

    Returns
    -------
    dict[str, Any]
        Null-pruned schema.org object.
    """
    if person.is_organization:
        return drop_null({"@type": "Organization", "name": person.family, "email": person.email})

    orcid = person.comment.get("ORCID")
    if orcid and not orcid.startswith("http"):
        orcid = f"{ORCID_BASE_URL}{orcid}"

    return drop_null(
        {
            "@type": "Person",
            "@id": orcid,
            "givenName": " ".join(person.given),
            "familyName": person.family,
            "email": person.email,
        }
    )


def parse_people(people: Iterable[Person] | None, codemeta: Mapping[str, Any]) -> dict[str, Any]:
    """Place persons into a CodeMeta mapping by role.

    Persons without a role are authors. A person with several roles is
    listed under each matching property; unknown roles are ignored.

    Parameters
    ----------
    people : Iterable[Person] | None
        Persons in declared order.
    codemeta : Mapping[str, Any]
        Mapping to extend. Not modified.

    Returns
    -------
    dict[str, Any]
        Copy of ``codemeta`` with role properties appended. Properties
        with nobody in them are not added.
    """
    result = dict(codemeta)

    for person in people or ():
        roles = person.role or ("aut",)
        entry = person_to_schema(person)
        for role in roles:
            prop = ROLE_PROPERTIES.get(role)
            if prop is None:
                continue
            result[prop] = [*result.get(prop, []), entry]

    return result
