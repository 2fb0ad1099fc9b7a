"""Unit tests for media type driven field visibility."""

from __future__ import annotations

import pytest

from formrules.visibility import (
    EZTEXT_LINK,
    MEDIA_TYPE_VISIBILITY,
    FieldGroup,
    FieldVisibilityRuleSet,
    MediaTypeKind,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("kind", list(MediaTypeKind))
def test_resolution_partitions_every_managed_group(kind: MediaTypeKind) -> None:
    """Shown and hidden groups are disjoint and cover every group."""

    resolution = MEDIA_TYPE_VISIBILITY.resolve(kind)
    assert resolution.show.isdisjoint(resolution.hide)
    assert resolution.show | resolution.hide == frozenset(FieldGroup)


@pytest.mark.parametrize(
    ("kind", "shown"),
    [
        (MediaTypeKind.email, {FieldGroup.smtp_server, FieldGroup.smtp_helo, FieldGroup.smtp_email}),
        (MediaTypeKind.script, {FieldGroup.exec_path}),
        (MediaTypeKind.sms, {FieldGroup.gsm_modem}),
        (MediaTypeKind.jabber, {FieldGroup.jabber_username, FieldGroup.passwd}),
        (MediaTypeKind.ez_texting, {FieldGroup.eztext_username, FieldGroup.eztext_limit, FieldGroup.passwd}),
    ],
)
def test_each_media_type_shows_its_groups(kind: MediaTypeKind, shown: set[FieldGroup]) -> None:
    resolution = MEDIA_TYPE_VISIBILITY.resolve(kind)
    assert resolution.show == frozenset(shown)
    for group in FieldGroup:
        flags = resolution.group(group)
        assert flags.visible is (group in shown)
        assert flags.enabled is flags.visible
        assert flags.css_hidden is not flags.visible


def test_password_group_is_shared_by_jabber_and_ez_texting() -> None:
    assert FieldGroup.passwd in MEDIA_TYPE_VISIBILITY.resolve(MediaTypeKind.jabber).show
    assert FieldGroup.passwd in MEDIA_TYPE_VISIBILITY.resolve(MediaTypeKind.ez_texting).show
    assert FieldGroup.passwd in MEDIA_TYPE_VISIBILITY.resolve(MediaTypeKind.email).hide


@pytest.mark.parametrize("kind", list(MediaTypeKind))
def test_ez_texting_link_is_an_independent_toggle(kind: MediaTypeKind) -> None:
    resolution = MEDIA_TYPE_VISIBILITY.resolve(kind)
    assert resolution.toggles[EZTEXT_LINK] is (kind is MediaTypeKind.ez_texting)


@pytest.mark.parametrize("kind", list(MediaTypeKind))
def test_resolve_is_idempotent(kind: MediaTypeKind) -> None:
    assert MEDIA_TYPE_VISIBILITY.resolve(kind) == MEDIA_TYPE_VISIBILITY.resolve(kind)


def test_rule_set_requires_every_discriminant() -> None:
    with pytest.raises(ValueError, match="missing discriminants"):
        FieldVisibilityRuleSet({MediaTypeKind.email: frozenset({FieldGroup.smtp_server})})


def test_rule_set_rejects_unmanaged_groups() -> None:
    table = {kind: frozenset({FieldGroup.passwd}) for kind in MediaTypeKind}
    with pytest.raises(ValueError, match="unmanaged groups"):
        FieldVisibilityRuleSet(table, managed=frozenset({FieldGroup.smtp_server}))
