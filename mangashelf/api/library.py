from fastapi import APIRouter, HTTPException
from mangashelf.api.schemas import ChapterUpdate, LibraryEntryIn, LibraryEntryOut
from mangashelf.services import library_service

router = APIRouter(tags=["library"])

@router.get("/", response_model=list[LibraryEntryOut])
def list_library():
    return library_service.get_library()

@router.post("/", response_model=LibraryEntryOut, status_code=201)
def add_to_library(body: LibraryEntryIn):
    try:
        entry, created = library_service.add_entry(body.title, body.site, body.chapter_url)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if not created:
        raise HTTPException(status_code=409, detail="This manga already exists in your library.")
    return entry

@router.delete("/{entry_id}", status_code=204)
def remove_from_library(entry_id: int):
    if not library_service.remove_entry(entry_id):
        raise HTTPException(status_code=404, detail=f"Entry {entry_id} not found")

@router.put("/{entry_id}/chapter", response_model=LibraryEntryOut)
def update_chapter(entry_id: int, body: ChapterUpdate):
    try:
        entry = library_service.update_last_chapter(entry_id, body.chapter_url)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Entry {entry_id} not found")
    return entry
