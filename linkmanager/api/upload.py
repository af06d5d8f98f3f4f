"""Image upload endpoint."""

from fastapi import APIRouter, File, UploadFile

from linkmanager.dependencies import UploadServiceDep
from linkmanager.schemas.site_config import ResultResponse, UploadResponse
from linkmanager.services.upload_service import NoFileProvided
from linkmanager.utils.logging import get_logger

router = APIRouter()

logger = get_logger(__name__)

IMAGE_FIELD = "image"


@router.post(
    "",
    response_model=UploadResponse,
    responses={
        400: {"model": ResultResponse},
        413: {"model": ResultResponse},
        500: {"model": ResultResponse},
    },
)
def upload_image(
    service: UploadServiceDep,
    image: UploadFile | str | None = File(None),
) -> UploadResponse:
    """
    Store an image sent as the multipart field ``image``.

    Returns the ``/uploads/...`` path of the stored file. Save it as the
    site's ``imageUrl`` to display it.
    """
    # A plain text field named "image" carries no file
    if image is None or isinstance(image, str):
        raise NoFileProvided()
    try:
        image_url = service.accept_upload(
            image.file,
            image.content_type,
            image.filename,
            field_name=IMAGE_FIELD,
        )
    finally:
        image.file.close()

    logger.info("image_uploaded", image_url=image_url, original_name=image.filename)
    return UploadResponse(
        success=True,
        message="Image uploaded successfully",
        imageUrl=image_url,
    )
