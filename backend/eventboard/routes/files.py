from fastapi import APIRouter, File, Form, HTTPException, UploadFile
from fastapi.responses import Response
import mimetypes

from .. import schemas
from ..storage import load_binary_payload, save_binary_payload

router = APIRouter(prefix="/api/files", tags=["files"])


@router.post("/images", response_model=schemas.ImageUploadOut)
async def upload_image(
    upload: UploadFile = File(...),
    namespace: str = Form("covers"),
):
    content_type = upload.content_type or ""
    if not content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Only image uploads are accepted")
    data = await upload.read()
    if not data:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    key, storage_path, size = save_binary_payload(
        data,
        upload.filename or "image",
        content_type=content_type,
        namespace=namespace,
    )
    return schemas.ImageUploadOut(url=f"/api/files/images/{key}", storage_path=storage_path, size=size)


@router.get("/images/{key:path}")
def get_image(key: str):
    try:
        data = load_binary_payload(key)
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail="Image not found")
    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(content=data, media_type=media_type)
