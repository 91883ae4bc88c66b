"""Shared test fixtures."""

import random

import pytest

from ontology_cards.core.session.state import ViewerState, begin_load, complete_load
from ontology_cards.models.ontology import OntologyClass
from tests.unit.fakes import FakeOntologyApi

# API-shaped records. Sorted by name: Cough, Fever, Headache, Nurse, Orphan, Role, Symptom.
CLASS_RECORDS = [
    {
        "id": "symptom",
        "label": "Symptom",
        "local_name": "Symptom",
        "root_class": "Clinical",
        "category": "symptom",
        "description": "Something a patient reports",
        "superclasses_list": [],
        "subclasses_list": ["Fever", "Cough", "Headache"],
        "stats": {"subclasses_count": 3, "hierarchy_depth": 1, "total_descendants": 3},
    },
    {
        "id": "fever",
        "label": "Fever",
        "local_name": "Fever",
        "root_class": "Clinical",
        "category": "symptom",
        "description": "Elevated body temperature",
        "superclasses_list": ["Symptom"],
        "properties_list": ["hasTemperature", "hasOnset"],
        "instances_list": ["fever-1"],
        "stats": {
            "properties_count": 2,
            "instances_count": 1,
            "hierarchy_depth": 2,
            "superclasses_count": 1,
        },
    },
    {
        "id": "cough",
        "label": "Cough",
        "local_name": "Cough",
        "root_class": "Clinical",
        "category": "symptom",
        "description": "Sudden expulsion of air",
        "superclasses_list": ["Symptom"],
        "properties_list": ["hasDuration"],
        "stats": {"properties_count": 1, "hierarchy_depth": 2, "superclasses_count": 1},
    },
    {
        "id": "headache",
        "label": "Headache",
        "local_name": "Headache",
        "root_class": "Clinical",
        "category": "symptom",
        "description": "Pain in the head",
        "superclasses_list": ["Symptom"],
        "instances_list": ["h-1", "h-2", "h-3"],
        "stats": {"instances_count": 3, "hierarchy_depth": 2, "superclasses_count": 1},
    },
    {
        "id": "role",
        "label": "Role",
        "local_name": "Role",
        "root_class": "Staff",
        "category": "role",
        "superclasses_list": [],
        "subclasses_list": ["Nurse"],
        "stats": {"subclasses_count": 1, "hierarchy_depth": 1},
    },
    {
        "id": "nurse",
        "label": "Nurse",
        "local_name": "Nurse",
        "root_class": "Staff",
        "category": "role",
        "description": "Cares for patients",
        "superclasses_list": ["Role"],
        "stats": {"hierarchy_depth": 2, "superclasses_count": 1},
    },
    {
        "id": "orphan",
        "label": "Orphan",
        "local_name": "Orphan",
        "description": "Unattached concept",
        "stats": {},
    },
]

FILE = "clinic.owl"


@pytest.fixture
def sample_classes() -> list[OntologyClass]:
    return [OntologyClass.from_dict(r) for r in CLASS_RECORDS]


@pytest.fixture
def loaded_state(sample_classes: list[OntologyClass]) -> ViewerState:
    """A state with the sample classes loaded, sorted by name."""
    state, generation = begin_load(ViewerState(), FILE)
    return complete_load(state, generation, sample_classes)


@pytest.fixture
def fake_api(sample_classes: list[OntologyClass]) -> FakeOntologyApi:
    return FakeOntologyApi({FILE: sample_classes})


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)
