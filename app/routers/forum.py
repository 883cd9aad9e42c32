from fastapi import APIRouter, Depends

from app.dependencies import get_forum_service
from app.schemas.forum import CommentCreate, PostCreate
from app.services.forum_service import ForumService

router = APIRouter(
    prefix="/forum",
    tags=["forum"]
)


@router.get("/posts")
def list_posts(service: ForumService = Depends(get_forum_service)):
    return service.list_posts()


@router.post("/posts")
def create_post(payload: PostCreate, service: ForumService = Depends(get_forum_service)):
    return service.create_post(payload.sent_fields())


@router.delete("/posts/{post_id}")
def delete_post(post_id: int, service: ForumService = Depends(get_forum_service)):
    return service.delete_post(post_id)


@router.get("/posts/{post_id}/comments")
def list_comments(post_id: int, service: ForumService = Depends(get_forum_service)):
    return service.list_comments(post_id)


@router.post("/posts/{post_id}/comments")
def create_comment(
    post_id: int,
    payload: CommentCreate,
    service: ForumService = Depends(get_forum_service),
):
    return service.create_comment(post_id, payload.sent_fields())
