"""
Blob storage for uploaded reports and profile images.

The database only keeps the locator returned by ``upload``; bytes are read back
through ``fetch`` when a report is relayed to its owner. Two backends:

- ``S3BlobStore`` uploads to a bucket and returns ``s3://bucket/key`` URIs
- ``LocalBlobStore`` writes under a directory and returns the absolute path

Both can also fetch plain ``http(s)://`` locators, for records created before
the move to S3.
"""
import logging
import os
import uuid
from typing import Optional, Tuple
from urllib.parse import urlparse

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from clinicbook.core.config import Settings
from clinicbook.core.exceptions import NotFound, UpstreamFailure

logger = logging.getLogger(__name__)

HTTP_FETCH_TIMEOUT = 30.0


def _detect_ext(original_filename: Optional[str]) -> str:
    if not original_filename:
        return "bin"
    _, ext = os.path.splitext(original_filename)
    return ext.lstrip(".").lower() or "bin"


def _content_type_for_ext(ext: str) -> str:
    return {
        "jpg": "image/jpeg",
        "jpeg": "image/jpeg",
        "png": "image/png",
        "webp": "image/webp",
        "pdf": "application/pdf",
    }.get(ext.lower(), "application/octet-stream")


def is_s3_uri(path: str) -> bool:
    return path.startswith("s3://")


def is_http_url(path: str) -> bool:
    return path.startswith("http://") or path.startswith("https://")


def parse_s3_uri(s3_uri: str) -> Tuple[str, str]:
    parsed = urlparse(s3_uri)
    bucket = parsed.netloc
    key = parsed.path.lstrip('/')
    if not bucket or not key:
        raise NotFound("Invalid S3 URI; missing bucket or key")
    return bucket, key


def fetch_http(url: str) -> bytes:
    try:
        response = httpx.get(url, timeout=HTTP_FETCH_TIMEOUT, follow_redirects=True)
    except httpx.HTTPError as e:
        raise UpstreamFailure(f"Failed to fetch file: {e}")
    if response.status_code != 200:
        raise UpstreamFailure(f"Failed to fetch file: {response.status_code}")
    return response.content


class BlobStore:
    """Interface shared by the storage backends"""

    def upload(self, data: bytes, filename: str, folder: str, content_type: Optional[str] = None) -> str:
        raise NotImplementedError

    def fetch(self, locator: str) -> bytes:
        raise NotImplementedError

    def delete(self, locator: str) -> None:
        raise NotImplementedError

    @staticmethod
    def build_key(prefix: str, folder: str, filename: str) -> str:
        name = f"{uuid.uuid4().hex}.{_detect_ext(filename)}"
        parts = [p.strip("/") for p in (prefix, folder) if p and p.strip("/")]
        return "/".join(parts + [name])


class S3BlobStore(BlobStore):
    def __init__(self, client, bucket: str, prefix: str = "uploads"):
        if not bucket or str(bucket).strip() == "":
            raise RuntimeError("S3 bucket is empty. Set AWS_S3_BUCKET or disable USE_S3_UPLOADS.")
        self.client = client
        self.bucket = bucket
        self.prefix = prefix

    def upload(self, data: bytes, filename: str, folder: str, content_type: Optional[str] = None) -> str:
        key = self.build_key(self.prefix, folder, filename)
        extra_args = {"ContentType": content_type or _content_type_for_ext(_detect_ext(filename))}
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra_args)
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure(f"Failed to upload to S3 s3://{self.bucket}/{key}: {e}")
        logger.info(f"Uploaded {len(data)} bytes to s3://{self.bucket}/{key}")
        return f"s3://{self.bucket}/{key}"

    def fetch(self, locator: str) -> bytes:
        if is_http_url(locator):
            return fetch_http(locator)
        if not is_s3_uri(locator):
            raise NotFound("File not found")
        bucket, key = parse_s3_uri(locator)
        try:
            obj = self.client.get_object(Bucket=bucket, Key=key)
            return obj["Body"].read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code")
            if code in ("NoSuchKey", "404"):
                raise NotFound("File not found")
            raise UpstreamFailure(f"Failed to fetch {locator}: {e}")
        except BotoCoreError as e:
            raise UpstreamFailure(f"Failed to fetch {locator}: {e}")

    def delete(self, locator: str) -> None:
        if not is_s3_uri(locator):
            return
        bucket, key = parse_s3_uri(locator)
        try:
            self.client.delete_object(Bucket=bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise UpstreamFailure(f"Failed to delete {locator} from S3: {e}")

    def verify(self, require_write: bool = False) -> Tuple[bool, str]:
        """
        Check bucket access at startup. Optionally attempts a write+delete roundtrip.
        """
        try:
            self.client.head_bucket(Bucket=self.bucket)
        except (BotoCoreError, ClientError) as e:
            return False, f"HeadBucket failed for '{self.bucket}': {e}"

        if require_write:
            test_key = self.build_key(self.prefix, "startup-checks", "write-check.txt")
            try:
                self.client.put_object(Bucket=self.bucket, Key=test_key, Body=b"ok")
                self.client.delete_object(Bucket=self.bucket, Key=test_key)
            except (BotoCoreError, ClientError) as e:
                return False, f"Write test failed for s3://{self.bucket}/{test_key}: {e}"

        return True, f"S3 verified (bucket={self.bucket}, write_test={'on' if require_write else 'off'})"


class LocalBlobStore(BlobStore):
    def __init__(self, root: str):
        self.root = os.path.abspath(root)

    def upload(self, data: bytes, filename: str, folder: str, content_type: Optional[str] = None) -> str:
        stored_path = os.path.join(self.root, self.build_key("", folder, filename))
        os.makedirs(os.path.dirname(stored_path), exist_ok=True)
        with open(stored_path, "wb") as f_out:
            f_out.write(data)
        return stored_path

    def _resolve(self, locator: str) -> str:
        path = os.path.abspath(locator)
        if os.path.commonpath([self.root, path]) != self.root:
            raise NotFound("File not found")
        return path

    def fetch(self, locator: str) -> bytes:
        if is_http_url(locator):
            return fetch_http(locator)
        path = self._resolve(locator)
        if not os.path.isfile(path):
            raise NotFound("File not found")
        with open(path, "rb") as f_in:
            return f_in.read()

    def delete(self, locator: str) -> None:
        if is_http_url(locator):
            return
        path = self._resolve(locator)
        if os.path.exists(path):
            os.remove(path)


def build_blob_store(settings: Settings) -> BlobStore:
    if settings.USE_S3_UPLOADS:
        client_kwargs = {}
        if settings.AWS_REGION:
            client_kwargs["region_name"] = settings.AWS_REGION
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            client_kwargs["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
            client_kwargs["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
        return S3BlobStore(
            boto3.client("s3", **client_kwargs),
            bucket=settings.AWS_S3_BUCKET,
            prefix=settings.UPLOADS_S3_PREFIX,
        )
    return LocalBlobStore(settings.UPLOADS_LOCAL_DIR)
