"""Object storage for profile photos and national ID scans (MinIO / S3)."""

import io
from pathlib import PurePath
from typing import Optional

from fastapi import UploadFile
from loguru import logger
from minio import Minio
from minio.error import S3Error

from models import constants
from models.config import settings
from models.exceptions import InvalidFileException, StorageException


class StorageService:
    """
    Stores images under per-user keys and hands back public URLs.

    Keys look like ``<user_id>/profile_photo.png``; the returned reference is
    ``<MINIO_PUBLIC_URL>/<bucket>/<key>``.
    """

    def __init__(self, client: Optional[Minio] = None, bucket: Optional[str] = None):
        self.client = client or Minio(
            settings.MINIO_ENDPOINT,
            access_key=settings.MINIO_ACCESS_KEY,
            secret_key=settings.MINIO_SECRET_KEY,
            secure=settings.MINIO_SECURE,
        )
        self.bucket = bucket or settings.MINIO_BUCKET
        self.public_url = settings.MINIO_PUBLIC_URL.rstrip("/")
        self._bucket_ready = False

    def ensure_bucket(self) -> None:
        """Create the bucket if it doesn't exist."""
        if self._bucket_ready:
            return
        try:
            if not self.client.bucket_exists(self.bucket):
                self.client.make_bucket(self.bucket)
                logger.info(f"Created storage bucket '{self.bucket}'")
        except S3Error as e:
            raise StorageException(f"Storage bucket unavailable: {e.code}") from e
        self._bucket_ready = True

    @staticmethod
    def validate_image(file: UploadFile, content: bytes) -> None:
        """
        Reject empty, oversized or non-image uploads.

        Raises:
            InvalidFileException: If the file fails any check.
        """
        if not content:
            raise InvalidFileException("File is empty")
        if len(content) > settings.max_upload_size_bytes:
            raise InvalidFileException(
                f"File size exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit"
            )
        if file.content_type not in constants.ALLOWED_IMAGE_TYPES:
            raise InvalidFileException(
                "Invalid file type. Only JPEG, PNG, GIF and WebP images are allowed"
            )

    @staticmethod
    def file_extension(filename: Optional[str]) -> str:
        suffix = PurePath(filename or "").suffix.lstrip(".").lower()
        return suffix or constants.DEFAULT_FILE_EXTENSION

    def get_file_url(self, object_name: str) -> str:
        return f"{self.public_url}/{self.bucket}/{object_name}"

    def extract_object_name(self, file_url: Optional[str]) -> Optional[str]:
        """
        Recover the object key from a URL built by ``get_file_url``.

        Returns:
            The key, or None if the URL does not point into this bucket.
        """
        if not file_url:
            return None
        prefix = f"{self.public_url}/{self.bucket}/"
        if not file_url.startswith(prefix):
            return None
        return file_url[len(prefix) :] or None

    def _upload(self, user_id: int, name: str, file: UploadFile) -> str:
        content = file.file.read()
        self.validate_image(file, content)
        self.ensure_bucket()

        object_name = f"{user_id}/{name}.{self.file_extension(file.filename)}"
        try:
            self.client.put_object(
                self.bucket,
                object_name,
                io.BytesIO(content),
                length=len(content),
                content_type=file.content_type,
            )
        except S3Error as e:
            logger.error(f"Upload of {object_name} failed: {e.code}")
            raise StorageException("Failed to upload file") from e

        logger.info(f"Stored {object_name} ({len(content)} bytes)")
        return self.get_file_url(object_name)

    def upload_profile_photo(self, user_id: int, file: UploadFile) -> str:
        return self._upload(user_id, constants.PROFILE_PHOTO_NAME, file)

    def upload_national_id_scan(self, user_id: int, file: UploadFile) -> str:
        return self._upload(user_id, constants.NATIONAL_ID_SCAN_NAME, file)

    def delete_file(self, object_name: str) -> None:
        """
        Remove an object.

        Raises:
            StorageException: If the store rejects the delete.
        """
        try:
            self.client.remove_object(self.bucket, object_name)
        except S3Error as e:
            raise StorageException(f"Failed to delete file: {e.code}") from e

    def delete_quietly(self, file_url: Optional[str]) -> None:
        """Best-effort removal of a previously stored file; failures are logged."""
        object_name = self.extract_object_name(file_url)
        if object_name is None:
            return
        try:
            self.delete_file(object_name)
        except StorageException as e:
            logger.warning(f"Could not delete old file {object_name}: {e.message}")


_storage_service: Optional[StorageService] = None


def get_storage_service() -> StorageService:
    """FastAPI dependency; the MinIO client is created on first use."""
    global _storage_service
    if _storage_service is None:
        _storage_service = StorageService()
    return _storage_service
