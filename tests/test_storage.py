import unittest
from unittest.mock import MagicMock, patch

import requests
from botocore.exceptions import ClientError

from onchain_ad_agent.config import S3Config
from onchain_ad_agent.core.storage import S3Uploader, create_s3_client
from onchain_ad_agent.errors import UploadError

IMAGE_URL = "https://images.example.com/generated.png"


def http_response(status=200, content=b"\x89PNG...", content_type="image/png"):
    response = MagicMock()
    response.status_code = status
    response.content = content
    response.headers = {"Content-Type": content_type}
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f"{status} Server Error")
    return response


class TestS3Uploader(unittest.TestCase):
    def setUp(self):
        self.config = S3Config()
        self.s3 = MagicMock()
        self.http = MagicMock()
        self.uploader = S3Uploader(self.config, client=self.s3, session=self.http)

    def test_upload_writes_object_and_returns_url(self):
        self.http.get.return_value = http_response()

        url = self.uploader.upload(IMAGE_URL)

        self.http.get.assert_called_once_with(IMAGE_URL, timeout=30)
        kwargs = self.s3.put_object.call_args.kwargs
        self.assertEqual(kwargs["Bucket"], "placeholderads")
        self.assertEqual(kwargs["Body"], b"\x89PNG...")
        self.assertEqual(kwargs["ContentType"], "image/png")
        self.assertTrue(kwargs["Key"].startswith("ad-images/"))
        self.assertTrue(kwargs["Key"].endswith(".png"))
        self.assertEqual(url, f"https://placeholderads.s3.ap-south-1.amazonaws.com/{kwargs['Key']}")

    def test_same_source_uploaded_twice_gets_distinct_keys(self):
        self.http.get.return_value = http_response()

        first = self.uploader.upload(IMAGE_URL)
        second = self.uploader.upload(IMAGE_URL)

        keys = [c.kwargs["Key"] for c in self.s3.put_object.call_args_list]
        self.assertEqual(len(keys), 2)
        self.assertNotEqual(keys[0], keys[1])
        self.assertIn(keys[0], first)
        self.assertIn(keys[1], second)

    @patch("onchain_ad_agent.core.storage.time.time_ns", return_value=1_700_000_000_123_000_000)
    def test_key_layout(self, _):
        key = self.uploader.generate_key()
        prefix, rest = key[: len("ad-images/")], key[len("ad-images/"):]
        self.assertEqual(prefix, "ad-images/")
        timestamp, suffix = rest[: -len(".png")].split("-")
        self.assertEqual(timestamp, "1700000000123")
        self.assertTrue(suffix.isdigit())

    def test_http_500_fails_without_storage_write(self):
        self.http.get.return_value = http_response(status=500)

        with self.assertRaises(UploadError):
            self.uploader.upload(IMAGE_URL)
        self.s3.put_object.assert_not_called()

    def test_connection_error_fails_without_storage_write(self):
        self.http.get.side_effect = requests.ConnectionError("unreachable")

        with self.assertRaises(UploadError) as ctx:
            self.uploader.upload(IMAGE_URL)
        self.assertIn("unreachable", str(ctx.exception))
        self.s3.put_object.assert_not_called()

    def test_non_image_payload_rejected(self):
        self.http.get.return_value = http_response(content=b"<html>", content_type="text/html")

        with self.assertRaises(UploadError) as ctx:
            self.uploader.upload(IMAGE_URL)
        self.assertIn("non-image", str(ctx.exception))
        self.s3.put_object.assert_not_called()

    def test_storage_failure_raises_upload_error(self):
        self.http.get.return_value = http_response()
        self.s3.put_object.side_effect = ClientError(
            {"Error": {"Code": "AccessDenied", "Message": "Access Denied"}}, "PutObject"
        )

        with self.assertRaises(UploadError) as ctx:
            self.uploader.upload(IMAGE_URL)
        self.assertIn("Access Denied", str(ctx.exception))


class TestCreateS3Client(unittest.TestCase):
    @patch("onchain_ad_agent.core.storage.boto3.client")
    def test_default_credential_chain(self, mock_client):
        create_s3_client(S3Config())
        kwargs = mock_client.call_args.kwargs
        self.assertEqual(mock_client.call_args.args, ("s3",))
        self.assertEqual(kwargs["region_name"], "ap-south-1")
        self.assertNotIn("aws_access_key_id", kwargs)

    @patch("onchain_ad_agent.core.storage.boto3.client")
    def test_explicit_credentials(self, mock_client):
        create_s3_client(S3Config(access_key_id="AKIA", secret_access_key="secret"))
        kwargs = mock_client.call_args.kwargs
        self.assertEqual(kwargs["aws_access_key_id"], "AKIA")
        self.assertEqual(kwargs["aws_secret_access_key"], "secret")


if __name__ == "__main__":
    unittest.main()
