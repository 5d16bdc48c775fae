"""
Visibility rules for interactions.

- private: visible to the owner only
- friends: visible to the owner and to users who follow the owner
- public:  visible to every authenticated viewer

Following is directional: if A follows B, A sees B's friends-only
interactions; B does not gain access to A's.
"""

from collections.abc import Collection, Iterable

from rex_core.schemas import InteractionResponse, Visibility


def can_view(
    owner_id: str, visibility: Visibility | str, viewer_id: str, following: Collection[str]
) -> bool:
    """
    Return whether ``viewer_id`` may see a record owned by ``owner_id``.

    Args:
        owner_id: Owner of the record.
        visibility: Record visibility.
        viewer_id: Requesting user.
        following: User ids the viewer follows.
    """
    if owner_id == viewer_id:
        return True
    visibility = Visibility(visibility)
    if visibility is Visibility.PUBLIC:
        return True
    if visibility is Visibility.FRIENDS:
        return owner_id in following
    return False


def filter_visible(
    interactions: Iterable[InteractionResponse], viewer_id: str, following: Collection[str]
) -> list[InteractionResponse]:
    """
    Keep only interactions the viewer may see, in input order.

    Private notes are stripped from interactions the viewer does not own.
    """
    following_set = following if isinstance(following, set | frozenset) else set(following)
    return [
        interaction.redacted_for(viewer_id)
        for interaction in interactions
        if can_view(interaction.user_id, interaction.visibility, viewer_id, following_set)
    ]
