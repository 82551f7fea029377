import pytest

from models import Group, Member


@pytest.fixture
def abc_group():
    return Group(
        id="g1",
        name="Trip",
        members=(Member("A", "Alice"), Member("B", "Bob"), Member("C", "Carol")),
        created_by="A",
    )


@pytest.fixture
def other_group():
    return Group(
        id="g2",
        name="Flat",
        members=(Member("A", "Alice"), Member("D", "Dan")),
        created_by="D",
    )
