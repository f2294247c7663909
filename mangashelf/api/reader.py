from fastapi import APIRouter, Query
from mangashelf.api.schemas import ImagesResponse
from mangashelf.services.extractor import get_extractor

router = APIRouter(tags=["reader"])

# extraction failures are reported in the body, never as an HTTP error
@router.get("/images", response_model=ImagesResponse)
async def chapter_images(url: str = Query(..., min_length=1), site: str = ""):
    result = await get_extractor().extract(url, site)
    return result.to_dict()
