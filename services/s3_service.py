"""
S3 Service for provisioning thesis submission folders on LocalStack S3.
"""
import boto3
import logging
from typing import Optional
from botocore.exceptions import ClientError
import config.settings as settings

logger = logging.getLogger(__name__)


class S3Service:
    """Service for handling S3 operations with LocalStack."""

    def __init__(self):
        """Initialize S3 service with LocalStack configuration."""
        self.bucket_name = settings.S3_BUCKET_NAME
        self._bucket_checked = False

        # Internal S3 client for operations (within Docker network)
        self.s3_client = boto3.client(
            's3',
            endpoint_url=settings.AWS_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_DEFAULT_REGION
        )

        # External S3 client for presigned URLs (accessible from host)
        self.external_endpoint = settings.S3_EXTERNAL_ENDPOINT_URL
        self.s3_client_external = boto3.client(
            's3',
            endpoint_url=self.external_endpoint,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            region_name=settings.AWS_DEFAULT_REGION
        )

        logger.info(f"S3 Service initialized - Internal: {settings.AWS_ENDPOINT_URL}, External: {self.external_endpoint}")

    def _ensure_bucket_exists(self) -> None:
        """Ensure the S3 bucket exists, create if not."""
        if self._bucket_checked:
            return
        try:
            self.s3_client.head_bucket(Bucket=self.bucket_name)
            logger.info(f"S3 bucket '{self.bucket_name}' exists")
        except ClientError as e:
            error_code = e.response['Error']['Code']
            if error_code in ('404', 'NoSuchBucket'):
                self.s3_client.create_bucket(Bucket=self.bucket_name)
                logger.info(f"Created S3 bucket '{self.bucket_name}'")
            else:
                logger.error(f"Error checking S3 bucket: {e}")
                raise
        self._bucket_checked = True

    def folder_key(self, folder_path: str) -> str:
        """S3 key of the zero-byte marker object that represents a folder."""
        return folder_path.strip('/') + '/'

    def folder_url(self, folder_path: str) -> str:
        """Public URL of a folder prefix."""
        return f"{self.external_endpoint.rstrip('/')}/{self.bucket_name}/{self.folder_key(folder_path)}"

    def create_folder(self, folder_path: str) -> str:
        """
        Create a folder marker object.

        Args:
            folder_path: Slash-separated folder path inside the bucket

        Returns:
            URL of the created folder

        Raises:
            ClientError: If S3 rejects the request
        """
        self._ensure_bucket_exists()
        key = self.folder_key(folder_path)

        self.s3_client.put_object(
            Bucket=self.bucket_name,
            Key=key,
            Body=b'',
            ContentType='application/x-directory'
        )

        logger.info(f"Created S3 folder: {key}")
        return self.folder_url(folder_path)

    def folder_exists(self, folder_path: str) -> bool:
        """Check if a folder marker exists in S3."""
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=self.folder_key(folder_path))
            return True
        except ClientError:
            return False

