from fastapi import APIRouter, Depends, HTTPException, status, Query
from typing import Optional

from draftdesk.core.errors import DraftError
from draftdesk.core.state import get_draft_store, get_viewer_id
from draftdesk.api.http.errors import http_error
from draftdesk.domains.drafts.schemas import CommentCreate, DraftCreate, DraftUpdate
from draftdesk.domains.drafts.services import DraftCommentService, DraftStore

router = APIRouter(prefix="/drafts", tags=["drafts"])


@router.get("")
def list_drafts(
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    """Доступные черновики и их раскладка по группам"""
    return {
        "drafts": store.list_accessible_drafts(viewer_id),
        "buckets": store.list_draft_buckets_for_user(viewer_id)
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create_draft(
    draft_data: DraftCreate,
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    """Создание черновика от имени текущего зрителя"""
    try:
        draft = store.create_draft(draft_data.model_copy(update={"owner_id": viewer_id}))
    except DraftError as e:
        raise http_error(e)
    return {"draft": draft}


@router.get("/collaborators")
def list_collaborators(
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    """Кандидаты в соавторы (все авторы, кроме текущего)"""
    return {"writers": store.list_potential_collaborators(viewer_id)}


@router.get("/{draft_id}")
def get_draft(
    draft_id: str,
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    try:
        draft = store.get_draft_workspace(draft_id, viewer_id)
    except DraftError as e:
        raise http_error(e)
    return {"draft": draft}


@router.patch("/{draft_id}")
def update_draft(
    draft_id: str,
    update_data: DraftUpdate,
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    try:
        draft = store.update_draft(draft_id, viewer_id, update_data)
    except DraftError as e:
        raise http_error(e)
    return {"draft": draft}


@router.get("/{draft_id}/versions")
def list_versions(
    draft_id: str,
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    try:
        revisions = store.list_draft_revisions(draft_id, viewer_id)
    except DraftError as e:
        raise http_error(e)
    return {"revisions": revisions}


@router.get("/{draft_id}/compare")
def compare_versions(
    draft_id: str,
    base: Optional[str] = Query(None),
    target: Optional[str] = Query(None),
    granularity: Optional[str] = Query(None, pattern="^(word|line)$"),
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    """Сравнение двух ревизий черновика"""
    if not base or not target:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="base and target revision ids are required"
        )
    try:
        comparison = store.compare_draft_revisions(draft_id, base, target, viewer_id, granularity)
    except DraftError as e:
        raise http_error(e)
    return {"comparison": comparison}


@router.get("/{draft_id}/comments")
def list_comments(
    draft_id: str,
    placement: Optional[str] = Query(None, pattern="^(inline|sidebar)$"),
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    try:
        comments = store.list_draft_comments(draft_id, viewer_id, placement)
    except DraftError as e:
        raise http_error(e)
    return {
        "comments": comments,
        "threads": DraftCommentService.partition_by_placement(comments)
    }


@router.post("/{draft_id}/comments", status_code=status.HTTP_201_CREATED)
def create_comment(
    draft_id: str,
    comment_data: CommentCreate,
    viewer_id: str = Depends(get_viewer_id),
    store: DraftStore = Depends(get_draft_store)
):
    try:
        comment = store.create_draft_comment(draft_id, viewer_id, comment_data)
    except DraftError as e:
        raise http_error(e)
    return {"comment": comment}
