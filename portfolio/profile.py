"""
Profile record for the site owner, including the avatar history.
"""

from __future__ import annotations

import logging
from typing import Optional

from portfolio.media import MediaLibrary
from portfolio.schemas import Profile, ProfileFields
from portfolio.store import DocumentStore

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, store: DocumentStore, media: MediaLibrary):
        self.store = store
        self.media = media

    def get(self) -> dict:
        """Return the stored profile, or `{}` before the first save."""
        return self.store.load()

    def save(
        self,
        fields: ProfileFields,
        avatar_name: Optional[str] = None,
        avatar_data: Optional[bytes] = None,
    ) -> Profile:
        """
        Overwrite the profile with `fields`.

        When avatar bytes are given they are stored like any upload and become
        the current avatar; otherwise the previous avatar is kept.
        """
        with self.store.locked():
            previous = self.store.load()
            avatar = previous.get("avatar")
            history = list(previous.get("avatar_history") or [])

            if avatar_data is not None:
                avatar = self.media.store_file(avatar_name, avatar_data)
                if avatar not in history:
                    history.append(avatar)

            profile = Profile(
                name=fields.name,
                bio=fields.bio,
                links=fields.links,
                avatar=avatar,
                avatar_history=history,
            )
            self.store.save(profile.model_dump())
        logger.info("Saved profile (avatar=%s, history=%d)", avatar, len(history))
        return profile
