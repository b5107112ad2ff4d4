import unittest
from unittest.mock import Mock

from googleapiclient.errors import HttpError

from driverelay.errors.exceptions import (
    AuthorizationError,
    DriveRelayError,
    HttpErrorInfo,
    UploadError,
    ValidationError,
    describe_http_error,
)


class TestExceptions(unittest.TestCase):
    def test_base_error_keeps_details_and_cause(self) -> None:
        cause = RuntimeError("root")
        err = DriveRelayError("msg", details={"k": "v"}, cause=cause)
        self.assertEqual(str(err), "msg")
        self.assertEqual(err.details["k"], "v")
        self.assertIs(err.cause, cause)

    def test_details_default_to_empty(self) -> None:
        err = UploadError("boom")
        self.assertEqual(err.details, {})
        self.assertIsNone(err.cause)

    def test_subclasses_share_base(self) -> None:
        for cls in (ValidationError, AuthorizationError, UploadError):
            self.assertTrue(issubclass(cls, DriveRelayError))

    def test_describe_http_error_uses_payload_reason(self) -> None:
        resp = Mock()
        resp.status = 403
        resp.reason = "Forbidden"
        exc = HttpError(
            resp=resp,
            content=b'{"error": {"message": "no access", "errors": [{"reason": "insufficientPermissions"}]}}',
        )

        info = describe_http_error(exc)

        self.assertEqual(
            info,
            HttpErrorInfo(status_code=403, reason="insufficientPermissions", message="no access"),
        )
        self.assertEqual(
            info.as_details(),
            {"status_code": 403, "reason": "insufficientPermissions", "message": "no access"},
        )

    def test_describe_http_error_with_unparseable_content(self) -> None:
        resp = Mock()
        resp.status = 502
        resp.reason = "Bad Gateway"
        info = describe_http_error(HttpError(resp=resp, content=b"<html>"))
        self.assertEqual(info, HttpErrorInfo(status_code=502, reason="Bad Gateway"))

    def test_describe_non_http_error_is_none(self) -> None:
        self.assertIsNone(describe_http_error(OSError("reset")))


if __name__ == "__main__":
    unittest.main()
