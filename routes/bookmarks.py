from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from db.database import get_store
from models.bookmark import Bookmark
from utils.bookmarks import list_bookmarks, remove_bookmark

router = APIRouter()


@router.get("/", response_model=List[Bookmark])
async def read_bookmarks(store=Depends(get_store)):
    return list_bookmarks(store)


@router.delete("/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_bookmark(word_id: str, store=Depends(get_store)):
    if not remove_bookmark(store, word_id):
        raise HTTPException(status_code=404, detail="Bookmark not found")
