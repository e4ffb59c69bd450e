from __future__ import annotations

import logging
from typing import Any, Mapping

from flight_mode.local_store import LocalStore
from flight_mode.local_store.record_ops import now_iso
from flight_mode.remote import RemoteStore

logger = logging.getLogger(__name__)


async def bootstrap_user_profile(
    store: LocalStore,
    remote: RemoteStore,
    profile: Mapping[str, Any],
    *,
    collection: str = "users",
    provider: str = "password",
) -> bool:
    """Create the remote user document if missing, then prime the local user cache.

    Remote failures are logged and do not prevent the local write. Returns True
    when a remote document was created.
    """
    user_id = profile.get("id")
    created = False
    if user_id:
        try:
            existing = await remote.get_document(collection, user_id)
            if existing is None:
                await remote.create_document(
                    collection,
                    user_id,
                    {
                        "uid": user_id,
                        "email": profile.get("email"),
                        "name": profile.get("display_name") or "Anonymous",
                        "photo_url": profile.get("photo_url"),
                        "provider": provider,
                        "created_at": now_iso(),
                    },
                )
                created = True
                logger.info("Created remote profile for user %s", user_id)
        except Exception:  # noqa: BLE001
            logger.exception("Could not bootstrap remote profile for user %s", user_id)

    store.save_user(profile)
    return created
