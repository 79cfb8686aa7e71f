from __future__ import annotations

import logging

from bson import ObjectId
from fastapi import HTTPException, status

logger = logging.getLogger(__name__)


async def record_review(collection, doc_id: ObjectId, uid: str, approve: bool, label: str):
    """Record one reviewer's approval or denial; a reviewer is only ever counted once.

    Every write changes a reviewer list and its count together and is guarded
    on list membership, so ``approvals``/``denials`` always equal the list
    lengths even when reviewers act at the same time.
    """
    add_list, add_count = ("approved_by", "approvals") if approve else ("denied_by", "denials")
    drop_list, drop_count = ("denied_by", "denials") if approve else ("approved_by", "approvals")

    await collection.update_one(
        {"_id": doc_id, "merged": None, drop_list: uid},
        {"$pull": {drop_list: uid}, "$inc": {drop_count: -1}},
    )
    await collection.update_one(
        {"_id": doc_id, "merged": None, add_list: {"$ne": uid}},
        {"$addToSet": {add_list: uid}, "$inc": {add_count: 1}},
    )

    doc = await collection.find_one({"_id": doc_id})
    if not doc:
        raise HTTPException(status_code=404, detail=f"No {label} exists with the provided id")
    if doc.get("merged"):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unable to review a merged {label}",
        )
    logger.info("%s %s %s by %s", label, doc_id, "approved" if approve else "denied", uid)
    return doc
