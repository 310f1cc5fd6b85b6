"""Specialty catalogue. No token needed: the slug check is granted to anon."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db_as_anon
from app.config import SPECIALTIES, get_specialty
from app.domain.profile_operations import profile_ops

router = APIRouter(prefix="/specialties", tags=["specialties"])


class SpecialtyRead(BaseModel):
    slug: str
    code: str
    name: str


class SlugValidation(BaseModel):
    slug: str
    valid: bool  # database check: non-empty
    known: bool  # present in the catalogue


@router.get("", response_model=list[SpecialtyRead])
async def list_specialties():
    """The specialty catalogue, in display order."""
    return [SpecialtyRead(slug=s.slug, code=s.code, name=s.name) for s in SPECIALTIES]


@router.get("/{slug}/validate", response_model=SlugValidation)
async def validate_specialty(
    slug: str,
    db: AsyncSession = Depends(get_db_as_anon),
):
    """Run a slug through both the database check and the catalogue."""
    valid = await profile_ops.validate_specialty_slug(db, slug)
    return SlugValidation(slug=slug, valid=valid, known=get_specialty(slug) is not None)
