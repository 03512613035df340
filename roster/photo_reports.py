"""Reports comparing the photo store with the roster tables."""
from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from .database import TeamMember
from .photo_updates import PhotoFile

MATCH_SAMPLE_SIZE = 10
UNMATCHED_SAMPLE_SIZE = 5


def build_integration_report(
    photos: Sequence[PhotoFile], members: Sequence[TeamMember]
) -> dict[str, object]:
    """Pair every photo with its member and summarise what is left over."""
    members_by_id = {member.id: member for member in members}
    photo_member_ids = {photo.member_id for photo in photos}

    matches: list[dict[str, object]] = []
    unmatched_photos: list[dict[str, object]] = []
    for photo in photos:
        member = members_by_id.get(photo.member_id)
        if member is None:
            unmatched_photos.append(
                {
                    "file": photo.filename,
                    "real_member_id": photo.member_id,
                    "timestamp": photo.sequence,
                    "extension": photo.extension,
                }
            )
            continue
        matches.append(
            {
                "member_id": member.id,
                "current_name": member.name,
                "team_id": member.team_id,
                "photo_file": photo.filename,
                "photo_timestamp": photo.sequence,
            }
        )

    unmatched_members = [
        {"id": member.id, "name": member.name, "team_id": member.team_id}
        for member in members
        if member.id not in photo_member_ids
    ]

    return {
        "total_photos": len(photos),
        "total_members": len(members),
        "matched_count": len(matches),
        "unmatched_photos": len(unmatched_photos),
        "unmatched_members": len(unmatched_members),
        "sample_matches": matches[:MATCH_SAMPLE_SIZE],
        "sample_unmatched_photos": unmatched_photos[:UNMATCHED_SAMPLE_SIZE],
        "sample_unmatched_members": unmatched_members[:UNMATCHED_SAMPLE_SIZE],
    }


def find_orphaned_photos(
    photo_map: Mapping[str, str], member_ids: Iterable[str]
) -> dict[str, str]:
    known = set(member_ids)
    return {
        member_id: filename
        for member_id, filename in photo_map.items()
        if member_id not in known
    }
