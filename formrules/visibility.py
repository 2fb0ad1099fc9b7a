"""Discriminant-driven field visibility for the media type form.

A media type form manages several field groups (SMTP settings, script path,
modem, credentials, ...). The selected `type` reveals a disjoint subset and
hides the rest. The informational Ez Texting link is a second, independent
visibility axis and is resolved from its own table.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Final


class MediaTypeKind(Enum):
    """Notification channel types."""

    email = 0
    script = 1
    sms = 2
    jabber = 3
    ez_texting = 100

    @property
    def label(self) -> str:
        return _MEDIA_TYPE_LABELS[self]


_MEDIA_TYPE_LABELS: Final[dict[MediaTypeKind, str]] = {
    MediaTypeKind.email: "Email",
    MediaTypeKind.script: "Script",
    MediaTypeKind.sms: "SMS",
    MediaTypeKind.jabber: "Jabber",
    MediaTypeKind.ez_texting: "Ez Texting",
}


class FieldGroup(Enum):
    """Field groups toggled together by the media type selector."""

    smtp_server = "smtp_server"
    smtp_helo = "smtp_helo"
    smtp_email = "smtp_email"
    exec_path = "exec_path"
    gsm_modem = "gsm_modem"
    jabber_username = "jabber_username"
    eztext_username = "eztext_username"
    eztext_limit = "eztext_limit"
    passwd = "passwd"


EZTEXT_LINK: Final[str] = "eztext_link"


@dataclass(frozen=True, slots=True)
class GroupVisibility:
    """Rendered flags for one field group.

    Showing a group drops its hidden styling and enables its inputs; hiding
    does the reverse, so `visible` and `enabled` always agree.
    """

    visible: bool

    @property
    def enabled(self) -> bool:
        return self.visible

    @property
    def css_hidden(self) -> bool:
        return not self.visible


@dataclass(frozen=True, slots=True)
class VisibilityResolution:
    """Result of resolving a discriminant value.

    Attributes:
        show: Groups revealed for the discriminant.
        hide: Every other managed group.
        toggles: Independent always-present elements and their visibility.
    """

    show: frozenset[FieldGroup]
    hide: frozenset[FieldGroup]
    toggles: Mapping[str, bool]

    def group(self, group: FieldGroup) -> GroupVisibility:
        return GroupVisibility(visible=group in self.show)


class FieldVisibilityRuleSet:
    """Lookup table from a closed discriminant enum to shown field groups.

    Args:
        shown: Discriminant -> groups revealed for it.
        toggles: Toggle id -> discriminants for which it is visible.
        managed: Full set of managed groups; defaults to all FieldGroup members.

    Raises:
        ValueError: When a discriminant is missing from the table or a table
            entry references an unmanaged group.
    """

    def __init__(
        self,
        shown: Mapping[MediaTypeKind, frozenset[FieldGroup]],
        *,
        toggles: Mapping[str, frozenset[MediaTypeKind]] | None = None,
        managed: frozenset[FieldGroup] | None = None,
    ) -> None:
        self._managed = managed if managed is not None else frozenset(FieldGroup)
        missing = [kind for kind in MediaTypeKind if kind not in shown]
        if missing:
            raise ValueError(f"Visibility table is missing discriminants: {[kind.name for kind in missing]}.")
        for kind, groups in shown.items():
            unknown = groups - self._managed
            if unknown:
                raise ValueError(
                    f"Visibility entry {kind.name!r} references unmanaged groups: {sorted(g.value for g in unknown)}."
                )
        self._shown = dict(shown)
        self._toggles = dict(toggles or {})

    @property
    def managed(self) -> frozenset[FieldGroup]:
        return self._managed

    def resolve(self, discriminant: MediaTypeKind) -> VisibilityResolution:
        """Partition managed groups into shown and hidden for a discriminant.

        Args:
            discriminant: Selected media type.

        Returns:
            VisibilityResolution whose `show` and `hide` sets are disjoint and
            together cover every managed group.
        """

        show = self._shown[discriminant]
        return VisibilityResolution(
            show=show,
            hide=self._managed - show,
            toggles={toggle: discriminant in kinds for toggle, kinds in self._toggles.items()},
        )


MEDIA_TYPE_VISIBILITY: Final[FieldVisibilityRuleSet] = FieldVisibilityRuleSet(
    {
        MediaTypeKind.email: frozenset({FieldGroup.smtp_server, FieldGroup.smtp_helo, FieldGroup.smtp_email}),
        MediaTypeKind.script: frozenset({FieldGroup.exec_path}),
        MediaTypeKind.sms: frozenset({FieldGroup.gsm_modem}),
        MediaTypeKind.jabber: frozenset({FieldGroup.jabber_username, FieldGroup.passwd}),
        MediaTypeKind.ez_texting: frozenset(
            {FieldGroup.eztext_username, FieldGroup.eztext_limit, FieldGroup.passwd}
        ),
    },
    toggles={EZTEXT_LINK: frozenset({MediaTypeKind.ez_texting})},
)
