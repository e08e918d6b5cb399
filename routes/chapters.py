from typing import List

from fastapi import APIRouter, Depends

from db.database import get_store
from db.store import CHAPTER_PREFIX, chapter_key, load_one, save_one
from models.word import Chapter

router = APIRouter()


@router.get("/", response_model=List[Chapter])
async def list_chapters(store=Depends(get_store)):
    chapters = []
    for key in store.keys(CHAPTER_PREFIX):
        chapter = load_one(store, key, Chapter)
        if chapter is not None:
            chapters.append(chapter)
    return chapters


@router.put("/{chapter_id}", response_model=Chapter)
async def save_chapter(chapter_id: str, chapter: Chapter, store=Depends(get_store)):
    """Store a chapter's word pool under its id."""
    chapter.id = chapter_id
    save_one(store, chapter_key(chapter_id), chapter)
    return chapter
