"""Shared fixtures: every test draws ids from its own counting generator."""

import pytest

from scratchdsl.ids import IdGenerator, use_id_generator
from scratchdsl.project import Project


@pytest.fixture(autouse=True)
def id_generator():
    generator = IdGenerator.counting()
    with use_id_generator(generator):
        yield generator


@pytest.fixture
def project():
    return Project()


@pytest.fixture
def sprite(project):
    return project.sprite("Cat")
