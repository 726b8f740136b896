from fastapi import APIRouter, Depends

from core.auth import get_current_user
from schemas.auth_schema import TokenUser
from schemas.media_schema import SignatureRequest, SignatureResponse
from services.media_store import MediaStore, get_media_store


router = APIRouter(tags=["Cloudinary"])


@router.get("/cloudinary-config")
def cloudinary_config(store: MediaStore = Depends(get_media_store)):
    return store.public_config()


@router.post("/cloudinary-signature", response_model=SignatureResponse)
def cloudinary_signature(
    payload: SignatureRequest | None = None,
    current_user: TokenUser = Depends(get_current_user),
    store: MediaStore = Depends(get_media_store),
):
    """
    Sign a direct browser upload. ``resource_type`` is not part of the
    signature but the client must still send it with the upload.
    """
    payload = payload or SignatureRequest()
    return store.sign_upload(folder=payload.folder, resource_type=payload.resource_type).as_dict()
