from pydantic import BaseModel, Field, HttpUrl

from ..core.storage import S3Uploader
from .base import ToolDescriptor


class S3UploadInput(BaseModel):
    dallEImageUrl: HttpUrl = Field(
        description="The URL returned by the image generator that should be fetched and uploaded to S3."
    )


def create_s3_upload_tool(uploader: S3Uploader) -> ToolDescriptor:
    # UploadError propagates so the runtime reports a failed tool call
    def upload_to_s3(params: S3UploadInput) -> str:
        return uploader.upload(str(params.dallEImageUrl))

    return ToolDescriptor(
        name="upload_to_s3",
        description="Uploads a PNG image from a generated image URL to S3 and returns the S3 URL.",
        args_schema=S3UploadInput,
        handler=upload_to_s3,
    )
