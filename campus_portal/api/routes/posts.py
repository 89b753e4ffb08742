"""Post Routes — CRUD with creator-or-admin mutation rights."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from campus_portal.api.deps import get_directory_actor
from campus_portal.core.authorization import authorize_owner_or_admin
from campus_portal.core.domain_types import PostId
from campus_portal.core.errors import ResourceNotFoundError
from campus_portal.core.identity import Actor
from campus_portal.infrastructure.database import get_db
from campus_portal.models.post import Post
from campus_portal.schemas.post import PostCreate, PostResponse, PostUpdate
from campus_portal.services.clubs import get_club_or_404

router = APIRouter(prefix="/api/posts", tags=["posts"])


async def get_post_or_404(db: AsyncSession, post_id: PostId) -> Post:
    result = await db.execute(
        select(Post)
        .where(Post.id == post_id)
        .execution_options(populate_existing=True),
    )
    post = result.scalar_one_or_none()
    if post is None:
        raise ResourceNotFoundError("Post", str(post_id))
    return post


@router.get("", response_model=list[PostResponse])
async def list_posts(
    club_id: UUID | None = Query(None, alias="clubId"),
    db: AsyncSession = Depends(get_db),
):
    """Newest first, optionally scoped to one club."""
    query = select(Post).order_by(Post.created_at.desc())
    if club_id is not None:
        query = query.where(Post.club_id == club_id)
    result = await db.execute(query)
    return [PostResponse.model_validate(p) for p in result.scalars().all()]


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(post_id: UUID, db: AsyncSession = Depends(get_db)):
    return PostResponse.model_validate(await get_post_or_404(db, PostId(post_id)))


@router.post(
    "", response_model=PostResponse, status_code=status.HTTP_201_CREATED,
)
async def create_post(
    body: PostCreate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    if body.club_id is not None:
        await get_club_or_404(db, body.club_id)
    post = Post(**body.model_dump(), user_id=actor.subject_id)
    db.add(post)
    await db.commit()
    return PostResponse.model_validate(await get_post_or_404(db, PostId(post.id)))


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: UUID,
    body: PostUpdate,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    post = await get_post_or_404(db, PostId(post_id))
    authorize_owner_or_admin(actor, post.user_id, "update", "post")
    changes = body.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in changes.items():
        setattr(post, field, value)
    await db.commit()
    return PostResponse.model_validate(await get_post_or_404(db, PostId(post_id)))


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: UUID,
    actor: Actor = Depends(get_directory_actor),
    db: AsyncSession = Depends(get_db),
):
    post = await get_post_or_404(db, PostId(post_id))
    authorize_owner_or_admin(actor, post.user_id, "delete", "post")
    await db.delete(post)
    await db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
