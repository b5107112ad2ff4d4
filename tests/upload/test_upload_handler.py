import tempfile
import unittest
from pathlib import Path
from unittest.mock import AsyncMock, Mock

from googleapiclient.errors import HttpError

from driverelay.errors import AuthorizationError, UploadError, ValidationError
from driverelay.upload import UploadHandler, UploadRequest


def _valid_request() -> UploadRequest:
    return UploadRequest(file_name="a.pdf", parent_id="p1", mime_type="application/pdf")


class TestUploadHandler(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.file_path = Path(self._tmp.name) / "notion.pdf"
        self.file_path.write_bytes(b"%PDF-1.4 fake")

        self.creds = object()
        self.auth = Mock()
        self.auth.authorize = AsyncMock(return_value=self.creds)

        self.service = Mock()
        self.files_resource = Mock()
        self.service.files.return_value = self.files_resource
        self.files_resource.create.return_value.execute.return_value = {"id": "F123"}
        self.service_factory = Mock(return_value=self.service)

        self.handler = UploadHandler(
            self.auth,
            self.file_path,
            service_factory=self.service_factory,
        )

    def tearDown(self) -> None:
        self._tmp.cleanup()

    async def test_upload_returns_file_id(self) -> None:
        result = await self.handler.handle_upload(_valid_request())

        self.assertEqual(result.file_id, "F123")
        self.assertEqual(result.name, "a.pdf")
        self.assertEqual(result.parent_id, "p1")
        self.auth.authorize.assert_awaited_once()
        self.service_factory.assert_called_once_with(self.creds)

        kwargs = self.files_resource.create.call_args.kwargs
        self.assertEqual(kwargs["body"], {"name": "a.pdf", "parents": ["p1"]})
        self.assertEqual(kwargs["fields"], "id")
        self.assertEqual(kwargs["media_body"].mimetype(), "application/pdf")

    async def test_validation_error_skips_auth_and_remote(self) -> None:
        with self.assertRaises(ValidationError):
            await self.handler.handle_upload(
                UploadRequest(file_name="a.pdf", parent_id=None, mime_type=None)
            )

        self.auth.authorize.assert_not_awaited()
        self.service_factory.assert_not_called()

    async def test_remote_http_error_becomes_upload_error(self) -> None:
        resp = Mock()
        resp.status = 503
        resp.reason = "Service Unavailable"
        self.files_resource.create.return_value.execute.side_effect = HttpError(
            resp=resp,
            content=b'{"error": {"message": "backend down", "errors": [{"reason": "backendError"}]}}',
        )

        with self.assertRaises(UploadError) as ctx:
            await self.handler.handle_upload(_valid_request())

        err = ctx.exception
        self.assertEqual(str(err), "Failed to upload file")
        self.assertEqual(err.details["status_code"], 503)
        self.assertEqual(err.details["reason"], "backendError")
        self.assertIsInstance(err.cause, HttpError)

    async def test_network_error_becomes_upload_error(self) -> None:
        self.files_resource.create.return_value.execute.side_effect = OSError("connection reset")

        with self.assertRaises(UploadError) as ctx:
            await self.handler.handle_upload(_valid_request())

        self.assertNotIn("status_code", ctx.exception.details)
        self.assertEqual(ctx.exception.details["file_name"], "a.pdf")

    async def test_authorization_error_becomes_upload_error(self) -> None:
        self.auth.authorize.side_effect = AuthorizationError("denied")

        with self.assertRaises(UploadError) as ctx:
            await self.handler.handle_upload(_valid_request())

        self.assertIsInstance(ctx.exception.cause, AuthorizationError)
        self.service_factory.assert_not_called()

    async def test_missing_local_file_becomes_upload_error(self) -> None:
        self.file_path.unlink()

        with self.assertRaises(UploadError) as ctx:
            await self.handler.handle_upload(_valid_request())

        self.assertIsInstance(ctx.exception.cause, FileNotFoundError)
        self.files_resource.create.assert_not_called()

    async def test_response_without_id_is_upload_error(self) -> None:
        self.files_resource.create.return_value.execute.return_value = {}

        with self.assertRaises(UploadError):
            await self.handler.handle_upload(_valid_request())


if __name__ == "__main__":
    unittest.main()
