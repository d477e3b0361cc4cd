"""
Fixtures compartidos.
"""

import json

import pytest

from obituary_match.storage import BusinessAffiliation, Record


def make_record(full_name, aliases=(), birth_year=1950, **overrides):
    fields = dict(
        full_name=full_name,
        aliases=tuple(aliases),
        birth_year=birth_year,
        death_year=birth_year + 70,
        last_residence="Springfield",
        occupation="Clerk",
        business_affiliations=(),
    )
    fields.update(overrides)
    return Record(**fields)


@pytest.fixture
def john_smith():
    return make_record(
        "John Smith",
        aliases=["Johnny Smith"],
        birth_year=1950,
        business_affiliations=(BusinessAffiliation("Smith & Sons Hardware", "Founder"),),
    )


@pytest.fixture
def capone():
    return make_record(
        "Alphonse Gabriel Capone",
        aliases=["Scarface", "Alphonse Capone"],
        birth_year=1899,
    )


@pytest.fixture
def margaret():
    return make_record("Margaret O'Neill", birth_year=1932)


@pytest.fixture
def records(john_smith, capone, margaret):
    return [john_smith, capone, margaret]


@pytest.fixture
def payload():
    return {
        "businesses": [
            {"name": "Smith & Sons Hardware", "category": "Retail"},
            {"name": "Lakeside Bakery", "category": "Food & Beverage"},
        ],
        "obituaries": [
            {
                "full_name": "John Smith",
                "aliases": ["Johnny Smith"],
                "birth_year": 1950,
                "death_year": 2019,
                "last_residence": "Springfield, Illinois",
                "occupation": "Hardware Store Owner",
                "business_affiliations": [{"name": "Smith & Sons Hardware", "role": "Founder"}],
            },
            {
                "full_name": "Alphonse Gabriel Capone",
                "aliases": ["Al Capone", "Alphonse Capone"],
                "birth_year": 1899,
                "death_year": 1947,
                "last_residence": "Palm Island, Florida",
                "occupation": "Businessman",
                "business_affiliations": [],
            },
            {
                "full_name": "Margaret O'Neill",
                "birth_year": 1932,
                "death_year": 2008,
                "last_residence": "Madison, Wisconsin",
                "occupation": "Baker",
                "business_affiliations": [
                    {"name": "Lakeside Bakery", "role": "Owner"},
                    {"name": "Corner Tea Room", "role": "Partner"},
                ],
            },
        ],
        "samples": [
            {"name": "Al Capone", "year": 1899},
            {"name": "Jon Smith", "year": "1950"},
            {"name": "Margaret ONeill"},
        ],
    }


@pytest.fixture
def data_file(tmp_path, payload):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture
def record_factory():
    return make_record
