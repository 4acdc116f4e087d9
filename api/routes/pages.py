"""Home page served from STATIC_DIR."""

from core.settings import app_settings
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse

router = APIRouter()


@router.get("/", include_in_schema=False)
async def home():
    index = app_settings.static_dir / "index.html"
    if not index.is_file():
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return FileResponse(index)
