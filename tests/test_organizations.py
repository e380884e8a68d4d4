import random

from app.analytics.organizations import group_by_organization, search_organizations
from app.models.user import User


def make_user(uid, organization=None, frozen=False):
    document = {"_id": uid, "UserID": uid, "Name": uid, "isUserFreezed": frozen}
    if organization is not None:
        document["Organization"] = organization
    return User.from_document(document)


def test_groups_one_organization_and_leaves_out_unaffiliated_users():
    users = [
        make_user("u1", "Acme"),
        make_user("u2", "Acme"),
        make_user("u3", "Acme", frozen=True),
        make_user("u4"),
        make_user("u5", ""),
    ]

    groups = group_by_organization(users)

    assert len(groups) == 1
    acme = groups[0]
    assert (acme.name, acme.total, acme.active, acme.frozen) == ("Acme", 3, 2, 1)
    assert {user.id for user in acme.users} == {"u1", "u2", "u3"}


def test_counts_add_up_and_cover_every_affiliated_user():
    rng = random.Random(7)
    users = [
        make_user(f"u{i}", rng.choice(["Acme", "Globex", "Initech", "", None]), frozen=rng.random() < 0.3)
        for i in range(60)
    ]

    groups = group_by_organization(users)

    for group in groups:
        assert group.active + group.frozen == group.total == len(group.users)
    grouped_ids = {user.id for group in groups for user in group.users}
    assert grouped_ids == {user.id for user in users if user.organization}


def test_largest_organization_first_and_repeatable():
    users = [make_user("a1", "Small")] + [make_user(f"b{i}", "Big") for i in range(3)]

    first = group_by_organization(users)
    second = group_by_organization(users)

    assert [group.name for group in first] == ["Big", "Small"]
    assert first == second


def test_works_on_raw_documents():
    documents = [{"Organization": "Acme", "isUserFreezed": True}, {"Organization": "Acme"}]

    groups = group_by_organization(documents, organization_field="Organization", frozen_field="isUserFreezed")

    assert (groups[0].total, groups[0].active, groups[0].frozen) == (2, 1, 1)


def test_search_is_case_insensitive_substring():
    groups = group_by_organization([make_user("u1", "Acme Corp"), make_user("u2", "Globex")])

    assert [group.name for group in search_organizations(groups, "acme")] == ["Acme Corp"]
    assert len(search_organizations(groups, "")) == 2
    assert search_organizations(groups, "initech") == []
